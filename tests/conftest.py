"""
Pytest configuration for autolock tests.
"""


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "requires_tmux: mark test as requiring a tmux server"
    )
