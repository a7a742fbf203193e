"""Version-control access used to discover newly added templates."""

from template_registrar.vcs.git_history import GitHistory

__all__ = ["GitHistory"]
