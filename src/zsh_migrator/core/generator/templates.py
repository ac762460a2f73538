"""Base shell templates rendered into every generated .zshrc.

The names of ``BASE_FUNCTIONS`` make up the reserved set: the parser drops
user functions with these names because the template already defines them.
"""

from dataclasses import dataclass

from zsh_migrator.domain.features import Feature


@dataclass(frozen=True, slots=True)
class PluginStanza:
    """Loader for one plugin from the custom plugins directory.

    Attributes:
        feature: Flag that enables the plugin
        directory: Directory name under $ZSH_PLUGINS_DIR
        scripts: Candidate scripts, the first one found is sourced
        extra_lines: Lines run after sourcing (key bindings and such)

    """

    feature: Feature
    directory: str
    scripts: tuple[str, ...]
    extra_lines: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ToolAliasStanza:
    """Aliases that only make sense when ``binary`` is installed."""

    binary: str
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class AliasGroup:
    """Named group of base aliases, optionally gated by a flag."""

    title: str
    feature: Feature | None
    lines: tuple[str, ...]


HISTORY_BASE_LINES: tuple[str, ...] = (
    'HISTFILE="$HOME/.zsh_history"',
    "HISTSIZE=10000",
    "SAVEHIST=10000",
)

HISTORY_ENHANCED_LINES: tuple[str, ...] = (
    "setopt APPEND_HISTORY",
    "setopt EXTENDED_HISTORY",
    "setopt INC_APPEND_HISTORY",
    "setopt SHARE_HISTORY",
    "setopt HIST_IGNORE_DUPS",
    "setopt HIST_IGNORE_ALL_DUPS",
    "setopt HIST_FIND_NO_DUPS",
)

AUTOCOMPLETION_LINES: tuple[str, ...] = (
    "autoload -Uz compinit && compinit",
    "zstyle ':completion:*' menu select",
    "zstyle ':completion:*' matcher-list 'm:{a-z}={A-Za-z}'",
)

CORRECTION_LINES: tuple[str, ...] = ("setopt CORRECT",)

PATH_LINES: tuple[str, ...] = (
    'export PATH="$HOME/.local/bin:/usr/local/bin:/usr/local/sbin:$PATH"',
    '[[ -d /opt/homebrew/bin ]] && export PATH="/opt/homebrew/bin:$PATH"',
)

# Syntax highlighting must be sourced after every other plugin
PLUGIN_STANZAS: tuple[PluginStanza, ...] = (
    PluginStanza(
        Feature.AUTOSUGGESTIONS,
        "zsh-autosuggestions",
        ("zsh-autosuggestions.zsh",),
    ),
    PluginStanza(
        Feature.COMPLETIONS,
        "zsh-completions",
        ("zsh-completions.plugin.zsh", "zsh-completions.zsh"),
    ),
    PluginStanza(
        Feature.HISTORY_SUBSTRING_SEARCH,
        "zsh-history-substring-search",
        ("zsh-history-substring-search.zsh",),
        (
            "bindkey '^[[A' history-substring-search-up",
            "bindkey '^[[B' history-substring-search-down",
        ),
    ),
    PluginStanza(
        Feature.YOU_SHOULD_USE,
        "zsh-you-should-use",
        ("you-should-use.plugin.zsh", "zsh-you-should-use.plugin.zsh"),
    ),
    PluginStanza(
        Feature.SYNTAX_HIGHLIGHTING,
        "zsh-syntax-highlighting",
        ("zsh-syntax-highlighting.zsh",),
    ),
)

TOOL_ALIAS_STANZAS: tuple[ToolAliasStanza, ...] = (
    ToolAliasStanza(
        "eza",
        (
            "alias ls='eza --group-directories-first'",
            "alias la='eza -a --group-directories-first'",
            "alias ll='eza -l --git --group-directories-first'",
            "alias l='eza -la --git --group-directories-first'",
        ),
    ),
    ToolAliasStanza("bat", ("alias cat='bat --paging=never'",)),
    ToolAliasStanza("rg", ("alias grep='rg'",)),
    ToolAliasStanza(
        "fd",
        ("export FZF_DEFAULT_COMMAND='fd --type f --hidden --exclude .git'",),
    ),
    ToolAliasStanza(
        "fzf",
        ('[[ -f "$HOME/.fzf.zsh" ]] && source "$HOME/.fzf.zsh"',),
    ),
)

ALIAS_GROUPS: tuple[AliasGroup, ...] = (
    AliasGroup(
        "Navigation",
        None,
        (
            "alias ..='cd ..'",
            "alias ...='cd ../..'",
            "alias ....='cd ../../..'",
        ),
    ),
    AliasGroup(
        "Git",
        None,
        (
            "alias gst='git status'",
            "alias ga='git add'",
            "alias gc='git commit'",
            "alias gp='git push'",
            "alias gl='git pull'",
            "alias gco='git checkout'",
            "alias gcb='git checkout -b'",
            "alias gb='git branch'",
            "alias gd='git diff'",
            "alias glog='git log --oneline --graph --decorate'",
            "alias gundo='git reset --soft HEAD~1'",
        ),
    ),
    AliasGroup(
        "Docker",
        Feature.DOCKER,
        (
            "alias d='docker'",
            "alias dc='docker compose'",
            "alias dps='docker ps'",
            "alias dpsa='docker ps -a'",
            "alias di='docker images'",
            "alias dex='docker exec -it'",
            "alias dlogs='docker logs -f'",
        ),
    ),
    AliasGroup(
        "Kubernetes",
        Feature.KUBERNETES,
        (
            "alias k='kubectl'",
            "alias kg='kubectl get'",
            "alias kd='kubectl describe'",
            "alias kl='kubectl logs -f'",
            "alias kp='kubectl get pods'",
            "alias kctx='kubectl config use-context'",
            "alias kns='kubectl config set-context --current --namespace'",
        ),
    ),
    AliasGroup(
        "Terraform",
        Feature.TERRAFORM,
        (
            "alias tf='terraform'",
            "alias tfw='terraform workspace'",
            "alias tfp='terraform plan'",
            "alias tfa='terraform apply'",
            "alias tfd='terraform destroy'",
        ),
    ),
    AliasGroup(
        "Productivity",
        Feature.PRODUCTIVITY_ALIASES,
        (
            "alias c='clear'",
            "alias h='history'",
            "alias j='jobs -l'",
            "alias v='vim'",
            "alias nv='nvim'",
            "alias t='tmux'",
            "alias ta='tmux attach -t'",
            "alias tn='tmux new -s'",
            "alias tl='tmux ls'",
        ),
    ),
)

BASE_FUNCTIONS: dict[str, str] = {
    "mkcd": """\
function mkcd() {
  mkdir -p "$1" && cd "$1"
}""",
    "extract": """\
function extract() {
  if [[ ! -f "$1" ]]; then
    echo "extract: '$1' is not a file" >&2
    return 1
  fi
  case "$1" in
    *.tar.bz2) tar xjf "$1" ;;
    *.tar.gz) tar xzf "$1" ;;
    *.tar.xz) tar xJf "$1" ;;
    *.bz2) bunzip2 "$1" ;;
    *.gz) gunzip "$1" ;;
    *.tar) tar xf "$1" ;;
    *.zip) unzip "$1" ;;
    *.7z) 7z x "$1" ;;
    *) echo "extract: unsupported archive '$1'" >&2; return 1 ;;
  esac
}""",
    "ports": """\
function ports() {
  if command -v ss >/dev/null 2>&1; then
    ss -tulpn
  else
    lsof -i -P -n | grep LISTEN
  fi
}""",
    "killport": """\
function killport() {
  local pids
  pids=$(lsof -ti tcp:"$1")
  [[ -n "$pids" ]] && kill -9 ${=pids}
}""",
    "weather": """\
function weather() {
  curl -s "wttr.in/${1:-}?format=3"
}""",
    "speedtest": """\
function speedtest() {
  curl -s https://raw.githubusercontent.com/sivel/speedtest-cli/master/speedtest.py | python3 -
}""",
    "backup": """\
function backup() {
  cp -a "$1" "$1.bak.$(date +%Y%m%d_%H%M%S)"
}""",
    "gitlog": """\
function gitlog() {
  git log --graph --pretty=format:'%h -%d %s (%cr) <%an>' --abbrev-commit "$@"
}""",
    "docker-clean": """\
function docker-clean() {
  docker container prune -f
  docker image prune -f
  docker volume prune -f
}""",
    "k8s-context": """\
function k8s-context() {
  kubectl config current-context
}""",
    "tf-workspace": """\
function tf-workspace() {
  terraform workspace show
}""",
    "public-ip": """\
function public-ip() {
  curl -s https://ifconfig.me
  echo
}""",
    "local-ip": """\
function local-ip() {
  if command -v ipconfig >/dev/null 2>&1; then
    ipconfig getifaddr en0
  else
    hostname -I | awk '{print $1}'
  fi
}""",
    "serve": """\
function serve() {
  python3 -m http.server "${1:-8000}"
}""",
    "newproject": """\
function newproject() {
  mkdir -p "$1" && cd "$1" && git init
}""",
    "deploy": """\
function deploy() {
  if [[ -f Makefile ]]; then
    make deploy
  elif [[ -f package.json ]]; then
    npm run deploy
  else
    echo "deploy: no Makefile or package.json here" >&2
    return 1
  fi
}""",
    "build": """\
function build() {
  if [[ -f Makefile ]]; then
    make
  elif [[ -f package.json ]]; then
    npm run build
  elif [[ -f Cargo.toml ]]; then
    cargo build
  else
    echo "build: no known build file here" >&2
    return 1
  fi
}""",
    "clean": """\
function clean() {
  find . -name '*.pyc' -delete
  find . -name '__pycache__' -type d -prune -exec rm -rf {} +
  find . -name '.DS_Store' -delete
}""",
}

RESERVED_FUNCTION_NAMES: frozenset[str] = frozenset(BASE_FUNCTIONS)
