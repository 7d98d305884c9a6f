import pytest


@pytest.fixture
def feed_input():
    """Return a factory for input providers that answer with the given lines in order."""
    def make(*lines):
        pending = list(lines)

        async def provider():
            if not pending:
                raise EOFError
            return pending.pop(0)

        return provider
    return make
