"""agentcmd - reader and validator for agent command files."""
__version__ = "0.1.0"
