"""
L0 Data — Installer families and their command conventions.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

# Preference order used when a manifest entry declares several installers.
# The first family whose field resolves for the host wins.
DEFAULT_INSTALLER_ORDER: tuple[str, ...] = (
    "apt",
    "brew",
    "pacman",
    "apk",
    "dnf",
    "zypper",
    "scoop",
    "choco",
    "go",
    "cargo",
    "pipx",
    "cask",
    "flatpak",
    "snap",
    "port",
    "yay",
    "pkg",
    "emerge",
    "nix",
    "mas",
    "xbps",
    "binary:darwin",
    "binary:linux",
    "binary:windows",
)

# Every installer-family field a manifest entry may carry.
INSTALLER_FAMILIES: frozenset[str] = frozenset(DEFAULT_INSTALLER_ORDER) | {
    "yum",
    "npm",
    "pkg-termux",
    "nix-env",
}

# Managers whose manifest values are sometimes written as full command
# lines ("sudo apt install foo"); only the last token is the package name.
LINE_ORIENTED_MANAGERS: frozenset[str] = frozenset(
    {"apt", "apk", "dnf", "zypper", "yum"}
)

# Installers invoked as ``<installer> install <package>``.
# Families not listed here are invoked as ``<installer> <package>`` and
# the runner shapes the real argv.
VERB_INSTALLERS: frozenset[str] = frozenset({
    "brew", "cask", "go", "cargo", "pipx", "npm", "flatpak", "snap",
    "scoop", "choco", "mas", "port", "nix-env",
})

# Real argv prefixes for verb installers, replacing ``<installer> install``.
# Verb installers not listed here run exactly as invoked.
VERB_INSTALL_COMMANDS: dict[str, tuple[str, ...]] = {
    "cask": ("brew", "install", "--cask"),
    "npm": ("npm", "install", "-g"),
    "flatpak": ("flatpak", "install", "-y", "--noninteractive"),
    "choco": ("choco", "install", "-y"),
    "nix-env": ("nix-env", "--install"),
}

# Real argv prefixes for simple managers, applied by the subprocess runner.
# Keyed by installer family; the package name is appended last.
SYSTEM_INSTALL_COMMANDS: dict[str, tuple[str, ...]] = {
    "apt": (
        "sudo", "env", "DEBIAN_FRONTEND=noninteractive",
        "apt-get", "-o", "DPkg::Options::=--force-confdef",
        "install", "-y", "--no-install-recommends", "--ignore-missing",
    ),
    "apk": ("sudo", "apk", "add", "--no-cache"),
    "dnf": (
        "sudo", "dnf", "install", "-y",
        "--setopt=skip_if_unavailable=True",
        "--setopt=skip_missing_names_on_install=True",
    ),
    "yum": (
        "sudo", "yum", "install", "-y",
        "--setopt=skip_if_unavailable=True",
        "--setopt=skip_missing_names_on_install=True",
    ),
    "zypper": ("sudo", "zypper", "--non-interactive", "install", "-y"),
    "pacman": ("sudo", "pacman", "-S", "--noconfirm", "--needed"),
    "yay": ("yay", "-S", "--noconfirm", "--needed"),
    "xbps": ("sudo", "xbps-install", "-y"),
    "emerge": ("sudo", "emerge", "--noreplace"),
    "pkg": ("sudo", "pkg", "install", "-y"),
    "pkg-termux": ("pkg", "install", "-y"),
    "nix": ("nix", "profile", "install"),
}

# Pseudo-commands that carry progress annotations, never a process.
SECTION = "section"
INFO = "info"
PSEUDO_COMMANDS: frozenset[str] = frozenset({SECTION, INFO})

# CPU architecture normalization. Manifests use ``x64`` and ``arm64``.
ARCH_MAP: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "AMD64": "x64",        # Windows
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",      # macOS (Darwin reports arm64)
    "ARM64": "arm64",
}
