from abc import ABC, abstractmethod


class Module(ABC):
    """Async module lifecycle: initialize, validate, execute, teardown.

    ``run()`` is what the CLI runner awaits; teardown always runs.
    """

    async def initialize(self) -> None:
        """Acquire resources. Override as needed."""

    async def validate(self) -> None:
        """Check preconditions; raise ValueError to abort. Override as needed."""

    @abstractmethod
    async def execute(self) -> int:
        """Run the module. Returns the process exit code."""
        ...

    async def teardown(self) -> None:
        """Release resources. Override as needed."""

    async def run(self) -> int:
        try:
            await self.initialize()
            await self.validate()
            return await self.execute()
        finally:
            await self.teardown()
