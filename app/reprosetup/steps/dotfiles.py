"""Dotfiles step: fingerprint-gated installation of .bashrc and .config dirs.

Sources live in ``source_dir`` (relative paths are resolved against the
directory of the configuration file). A target whose content already
matches its source is left alone. Any other existing target is replaced
only after confirmation, and the old version is kept next to it with a
``.backup`` suffix.
"""

import logging
import shutil
from pathlib import Path

from reprosetup.core.confirm import ConfirmationPolicy
from reprosetup.core.errors import ApplyError
from reprosetup.core.fingerprint import fingerprint_path
from reprosetup.core.state import SectionLayout, StateStore
from reprosetup.models.config import DotfilesConfig
from reprosetup.models.plan import Action, Outcome, OutcomeStatus
from reprosetup.utils.formatting import print_info, print_success, print_warning

logger = logging.getLogger(__name__)

DOTFILES_LAYOUT = SectionLayout("dotfiles", hash_field="content_hash", time_field="installed_at")


def backup_path(target: Path) -> Path:
    return target.with_name(target.name + ".backup")


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def _copy(source: Path, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    if source.is_dir():
        shutil.copytree(source, target, symlinks=True)
    else:
        shutil.copy2(source, target)


class DotfilesStep:
    """Installs dotfiles into a home directory.

    Attributes:
        source_dir: Directory holding the dotfiles to install.
        home: Home directory targets are installed into.
    """

    def __init__(
        self,
        settings: DotfilesConfig,
        policy: ConfirmationPolicy,
        store: StateStore,
        base_dir: Path,
        home: Path | None = None,
    ) -> None:
        self.settings = settings
        self.policy = policy
        self.section = store.section(DOTFILES_LAYOUT)
        self.source_dir = (base_dir / Path(settings.source_dir).expanduser()).resolve()
        self.home = home or Path.home()

    def targets(self) -> list[tuple[Path, Path]]:
        """Return the (source, target) pairs selected by the settings."""
        pairs: list[tuple[Path, Path]] = []
        if self.settings.bashrc:
            source = self.source_dir / ".bashrc"
            if source.is_file():
                pairs.append((source, self.home / ".bashrc"))
            else:
                print_warning(f"No .bashrc found in {self.source_dir}, skipping")

        if self.settings.config_dirs:
            config_root = self.source_dir / ".config"
            if config_root.is_dir():
                for source in sorted(config_root.iterdir()):
                    if source.is_dir():
                        pairs.append((source, self.home / ".config" / source.name))
            else:
                print_warning(f"No .config directory found in {self.source_dir}, skipping")
        return pairs

    def run(self) -> list[Outcome]:
        """Install every selected dotfile.

        Raises:
            ApplyError: If a file cannot be copied or backed up.
        """
        outcomes = []
        for source, target in self.targets():
            outcome = self.install(source, target)
            if outcome is not None:
                outcomes.append(outcome)
        return outcomes

    def install(self, source: Path, target: Path) -> Outcome | None:
        """Install one source at target.

        Returns:
            The outcome, or None if the target was already up to date.
        """
        key = "~/" + target.relative_to(self.home).as_posix()
        try:
            source_hash = fingerprint_path(source)
            target_hash = fingerprint_path(target)
        except OSError as e:
            raise ApplyError(f"Hashing {key} ({e})", ["hash", str(source), str(target)], 1) from e
        if source_hash is None:
            return None

        record = self.section.get(key)
        if target_hash == source_hash:
            if record is None or record.fingerprint != source_hash:
                self.section.record(key, source_hash, {"source": str(source)})
            logger.debug("%s is up to date", key)
            return None

        exists = target_hash is not None
        action = Action.UPDATE if exists else Action.CREATE
        if exists and not self.policy.resolve(f"Replace existing {key} with {source}?"):
            print_info(f"Keeping existing {key}")
            return Outcome("dotfiles", key, action, OutcomeStatus.DECLINED)

        try:
            if exists:
                backup = backup_path(target)
                _remove(backup)
                target.rename(backup)
                print_info(f"Backed up {key} to {backup.name}")
            _copy(source, target)
        except OSError as e:
            raise ApplyError(f"Installing {key} ({e})", ["copy", str(source), str(target)], 1) from e

        self.section.record(key, source_hash, {"source": str(source)})
        print_success(f"Installed {key}")
        return Outcome("dotfiles", key, action, OutcomeStatus.APPLIED)
