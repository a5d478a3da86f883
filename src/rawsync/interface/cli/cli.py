"""
CLI main entry point.
"""


def main() -> int:
    """
    Main entry point for the rawsync CLI.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    try:
        # Import here to keep `import rawsync` free of CLI dependencies
        from .orchestrator import app
        app()
        return 0
    except Exception as e:
        print(f"Error: {e}")
        return 1
