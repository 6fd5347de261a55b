"""Shell and tmux plugin lists.

These lists feed both the deployed configuration (zinit lines in .zshrc,
``@plugin`` lines in .tmux.conf) and the bootstrapper, which waits for each
plugin's directory to appear.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ZinitPlugin:
    """A plugin loaded by zinit.

    Attributes:
        source: GitHub ``user/repo`` or an Oh My Zsh snippet id (``OMZP::git``).
        snippet: Load with ``zinit snippet`` instead of ``zinit light``.
        deferred: Load in turbo mode after the prompt is shown.
    """

    source: str
    snippet: bool = False
    deferred: bool = False

    @property
    def directory_name(self) -> str | None:
        """Directory zinit clones the plugin into, None for snippets."""
        if self.snippet:
            return None
        return self.source.replace("/", "---")


ZINIT_PLUGINS: list[ZinitPlugin] = [
    ZinitPlugin("OMZP::git", snippet=True),
    ZinitPlugin("zsh-users/zsh-autosuggestions"),
    ZinitPlugin("zsh-users/zsh-syntax-highlighting"),
    ZinitPlugin("junegunn/fzf"),
    ZinitPlugin("OMZP::node", snippet=True),
    ZinitPlugin("OMZP::command-not-found", snippet=True),
    ZinitPlugin("zsh-users/zsh-history-substring-search", deferred=True),
    ZinitPlugin("OMZP::tmux", snippet=True, deferred=True),
    ZinitPlugin("OMZP::alias-finder", snippet=True, deferred=True),
]

TPM_REPO = "tmux-plugins/tpm"

TMUX_PLUGINS: list[str] = [
    TPM_REPO,
    "tmux-plugins/tmux-sensible",
    "tmux-plugins/tmux-continuum",
    "tmux-plugins/tmux-resurrect",
    "tmux-plugins/tmux-yank",
]


def render_zinit_block(plugins: list[ZinitPlugin]) -> str:
    """Render the zinit load lines for .zshrc."""
    lines = []
    for plugin in plugins:
        if plugin.deferred:
            continue
        verb = "snippet" if plugin.snippet else "light"
        lines.append(f"zinit {verb} {plugin.source}")

    deferred_light = [p.source for p in plugins if p.deferred and not p.snippet]
    deferred_snippets = [p.source for p in plugins if p.deferred and p.snippet]
    if deferred_light:
        lines.append("")
        lines.append(_turbo_group("zinit wait lucid light-mode for", deferred_light))
    if deferred_snippets:
        lines.append("")
        lines.append(_turbo_group("zinit wait lucid for", deferred_snippets))
    return "\n".join(lines)


def _turbo_group(head: str, sources: list[str]) -> str:
    return " \\\n".join([head, *(f"    {source}" for source in sources)])


def render_tpm_block(plugins: list[str]) -> str:
    """Render the ``@plugin`` lines for .tmux.conf."""
    return "\n".join(f"set -g @plugin '{plugin}'" for plugin in plugins)


def zinit_plugin_dirs(plugins: list[ZinitPlugin]) -> list[str]:
    return [name for p in plugins if (name := p.directory_name) is not None]


def tpm_plugin_dirs(plugins: list[str]) -> list[str]:
    """Directory names tpm installs plugins into, excluding tpm itself."""
    return [plugin.split("/", 1)[1] for plugin in plugins if plugin != TPM_REPO]
