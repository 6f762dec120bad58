from fileapi.cli.runner import run_cli

run_cli()
