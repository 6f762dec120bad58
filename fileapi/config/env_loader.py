"""Loader for ``.env/<name>.env`` files.

Format: ``KEY=VALUE`` per line. Blank lines and ``#`` comments are skipped,
one pair of surrounding single or double quotes is removed from values, and
everything after the first ``=`` belongs to the value.
"""

from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def load_env_file(env_name: str = "local", project_root: Path | None = None) -> dict[str, str]:
    """Return the pairs in ``<root>/.env/<env_name>.env``, or {} when the file is absent."""
    env_file = (project_root or _PROJECT_ROOT) / ".env" / f"{env_name}.env"
    if not env_file.is_file():
        return {}
    return parse_env_lines(env_file.read_text(encoding="utf-8").splitlines())


def parse_env_lines(lines: list[str]) -> dict[str, str]:
    result: dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        result[key.strip()] = value
    return result
