"""shellsetup - Idempotent development environment provisioning.

Installs and configures zsh, tmux, Starship, Ghostty, JetBrains Mono and
friends on macOS and Linux.
"""

__version__ = "2.0.0"
