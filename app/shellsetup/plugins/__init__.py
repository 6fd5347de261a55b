"""Shell and tmux plugin managers.

This module exports the plugin catalog and the bootstrapper that installs
zinit and tpm and waits for their plugins.
"""

from shellsetup.plugins.bootstrap import (
    BootstrapResult,
    PluginBootstrapper,
    PluginManager,
    tpm_manager,
    wait_for,
    zinit_manager,
)
from shellsetup.plugins.catalog import TMUX_PLUGINS, ZINIT_PLUGINS, ZinitPlugin

__all__ = [
    "TMUX_PLUGINS",
    "ZINIT_PLUGINS",
    "BootstrapResult",
    "PluginBootstrapper",
    "PluginManager",
    "ZinitPlugin",
    "tpm_manager",
    "wait_for",
    "zinit_manager",
]
