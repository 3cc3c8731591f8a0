"""Visual Studio Code module.

Besides ``settings.json`` this module carries three nested pipelines:

* custom CSS/JS assets referenced from settings through ``file://`` URIs,
* fonts named in the font-family settings,
* the list of installed extensions.

Install order matters: fonts first so a freshly opened editor can use them,
then assets so the files exist before settings point at them, then settings,
and extensions last. Extensions are skipped if settings were not applied.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from .. import jsonc
from ..errors import ExternalToolError, NotFoundError, ParseError, UserDeclinedError
from ..manifest import MANIFEST_NAME, ManifestEntry, read_manifest, write_manifest
from ..templating import MANAGED_TOKEN
from .base import FileState, FileStatus, Module, ModuleDescriptor, ModuleOutcome

logger = logging.getLogger(__name__)

SETTINGS_NAME = "settings.json"
EXTENSIONS_LIST_NAME = "extensions.txt"
EXTENSIONS_JSON_NAME = "extensions.json"
ASSETS_FOLDER = "CustomAssets"
FONTS_FOLDER = "Fonts"

FONT_KEYS = (
    "editor.fontFamily",
    "editor.codeLensFontFamily",
    "editor.inlayHints.fontFamily",
    "terminal.integrated.fontFamily",
    "debug.console.fontFamily",
    "markdown.preview.fontFamily",
    "scm.inputFontFamily",
    "chat.editor.fontFamily",
)

GENERIC_FAMILIES = {
    "monospace",
    "sans-serif",
    "serif",
    "cursive",
    "fantasy",
    "system-ui",
    "ui-monospace",
    "ui-sans-serif",
    "ui-serif",
    "ui-rounded",
    "math",
    "emoji",
    "fangsong",
    "-apple-system",
    "blinkmacsystemfont",
}

ASSET_SUFFIXES = (".css", ".js")
FILE_URI = re.compile(r"file://[^\"'\s]+")


def _string_values(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from _string_values(item)
    elif isinstance(value, list):
        for item in value:
            yield from _string_values(item)


def extract_asset_uris(settings: Any) -> List[str]:
    """Return unique ``file://`` URIs pointing at CSS or JS files, in order.

    Only string values of the parsed settings are searched, so references
    inside comments are ignored.
    """
    uris: List[str] = []
    for value in _string_values(settings):
        for match in FILE_URI.finditer(value):
            uri = match.group(0)
            if uri.lower().endswith(ASSET_SUFFIXES) and uri not in uris:
                uris.append(uri)
    return uris


def uri_to_path(uri: str) -> Path:
    """Convert a ``file://`` URI to a local path."""
    return Path(url2pathname(unquote(urlparse(uri).path)))


def extract_font_families(settings: Dict[str, Any]) -> List[str]:
    """Return the primary font family named by each font setting.

    Only the first entry of each comma-separated list is used. Quotes are
    trimmed and CSS generic families are ignored.
    """
    families: List[str] = []
    for key in FONT_KEYS:
        value = settings.get(key)
        if not isinstance(value, str) or not value.strip():
            continue
        family = value.split(",")[0].strip().strip("'\"").strip()
        if not family or family.lower() in GENERIC_FAMILIES:
            continue
        if family not in families:
            families.append(family)
    return families


def match_fonts(family: str, installed: Dict[str, str]) -> List[Tuple[str, str]]:
    """Find installed fonts whose name starts with ``family``.

    The prefix must end on a word boundary so that ``"Fira Code"`` matches
    ``"Fira Code Bold"`` but not ``"Fira Codex"``.
    """
    matches = []
    for name, path in sorted(installed.items()):
        if name == family or name.startswith(family + " "):
            matches.append((name, path))
    return matches


def missing_extensions(wanted: List[str], installed: List[str]) -> List[str]:
    """Return wanted extensions absent from ``installed``, ignoring case."""
    present = {ext.lower() for ext in installed}
    missing: List[str] = []
    seen = set()
    for ext in wanted:
        key = ext.lower()
        if key not in present and key not in seen:
            missing.append(ext)
            seen.add(key)
    return missing


def parse_extension_ids(manifest: Any) -> List[str]:
    """Extract extension identifiers from the editor's extensions.json."""
    if not isinstance(manifest, list):
        raise ValueError("extensions manifest must be a list")
    ids: Dict[str, str] = {}
    for entry in manifest:
        identifier = entry.get("identifier", {}) if isinstance(entry, dict) else {}
        ext_id = identifier.get("id") if isinstance(identifier, dict) else None
        if isinstance(ext_id, str) and ext_id:
            ids.setdefault(ext_id.lower(), ext_id)
    return sorted(ids.values(), key=str.lower)


def read_extension_list(path: Path) -> List[str]:
    """Read an extensions.txt file, ignoring blank lines and ``#`` comments."""
    extensions = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            extensions.append(line)
    return extensions


class EditorModule(Module):
    """Manages Visual Studio Code settings, extensions, custom assets and fonts."""

    descriptor = ModuleDescriptor(name="Editor", folder="Editor")

    @property
    def settings_path(self) -> Path:
        override = self.context.config.get_module_path(self.folder)
        if override:
            return override
        return self.context.environment.config_dir / "Code" / "User" / SETTINGS_NAME

    @property
    def extensions_manifest_path(self) -> Path:
        return self.context.environment.home / ".vscode" / "extensions" / EXTENSIONS_JSON_NAME

    @property
    def managed_assets_dir(self) -> Path:
        return self.context.environment.managed_dir / ASSETS_FOLDER

    @property
    def managed_fonts_dir(self) -> Path:
        return self.context.environment.managed_dir / FONTS_FOLDER

    def has_live_config(self) -> bool:
        return self.settings_path.is_file()

    def post_install_hint(self) -> Optional[str]:
        return "Restart Visual Studio Code to load new settings, fonts and assets"

    # Gather

    def gather(self, destination: Path) -> ModuleOutcome:
        settings_path = self.settings_path
        if not settings_path.is_file():
            error = NotFoundError(settings_path)
            logger.warning("%s: %s", self.name, error)
            self.console.print(f"[yellow]{self.name}: nothing to gather ({error})")
            return ModuleOutcome.FAILED

        try:
            text = settings_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read %s: %s", settings_path, e)
            self.console.print(f"[red]Error reading {settings_path}: {e}")
            return ModuleOutcome.FAILED

        try:
            data = jsonc.loads(text, path=settings_path)
        except ParseError as e:
            logger.error("Skipping custom assets and fonts: %s", e)
            self.console.print(f"[yellow]Could not parse settings, skipping assets and fonts: {e}")
            data = None

        if isinstance(data, dict):
            text = self._gather_assets(text, data, destination / ASSETS_FOLDER)
            self._gather_fonts(data, destination / FONTS_FOLDER)

        snapshot_path = destination / SETTINGS_NAME
        try:
            portable = self.context.templater.to_portable(text)
            if self.write_snapshot_bytes(portable.encode("utf-8"), snapshot_path):
                self.console.print(f"[green]Gathered: {settings_path} -> {snapshot_path}")
            else:
                self.console.print(f"[dim]Unchanged: {snapshot_path}")
        except OSError as e:
            logger.error("Failed to write %s: %s", snapshot_path, e)
            self.console.print(f"[red]Error writing {snapshot_path}: {e}")
            return ModuleOutcome.FAILED

        self._gather_extensions(destination)
        return ModuleOutcome.SUCCEEDED

    def _gather_assets(self, text: str, data: Dict[str, Any], folder: Path) -> str:
        """Copy referenced assets into ``folder`` and point settings at their managed copies."""
        entries: List[ManifestEntry] = []
        for uri in extract_asset_uris(data):
            if uri not in text:
                logger.warning("Custom asset URI %s is escaped in settings, leaving as is", uri)
                self.report_issue(f"Custom asset reference not rewritten: {uri}")
                continue
            path = uri_to_path(uri)
            if not path.is_file():
                logger.warning("Custom asset %s does not exist", path)
                self.report_issue(f"Custom asset not found, leaving as is: {path}")
                continue
            if any(entry.file_name == path.name for entry in entries):
                logger.warning("Custom asset name collision: %s", path)
                self.report_issue(f"Another asset is already named {path.name}: {path}")
                continue

            try:
                self.write_snapshot_bytes(path.read_bytes(), folder / path.name)
            except OSError as e:
                logger.error("Failed to copy asset %s: %s", path, e)
                self.report_issue(f"Error copying asset {path}: {e}")
                continue

            entries.append(
                ManifestEntry(
                    file_name=path.name,
                    metadata={"original_path": self.context.templater.to_portable(str(path))},
                )
            )
            # Stored templated, never percent-encoded
            text = text.replace(uri, f"file://{MANAGED_TOKEN}/{ASSETS_FOLDER}/{path.name}")
            self.console.print(f"[green]Gathered asset: {path.name}")

        self._finish_folder(folder, entries)
        return text

    def _gather_fonts(self, data: Dict[str, Any], folder: Path) -> None:
        families = extract_font_families(data)
        entries: List[ManifestEntry] = []
        if families:
            try:
                installed = self.context.fonts.list_installed()
            except ExternalToolError as e:
                logger.warning("Cannot list installed fonts: %s", e)
                self.report_issue(f"Skipping fonts, font lookup failed: {e}")
                return

            for family in families:
                matches = match_fonts(family, installed)
                if not matches:
                    logger.info("No installed font files for family %s", family)
                    self.report_issue(f"No installed font files found for '{family}'")
                    continue
                for font_name, file_path in matches:
                    source = Path(file_path)
                    if any(entry.file_name == source.name for entry in entries):
                        continue
                    try:
                        self.write_snapshot_bytes(source.read_bytes(), folder / source.name)
                    except OSError as e:
                        logger.error("Failed to copy font %s: %s", source, e)
                        self.report_issue(f"Error copying font {source}: {e}")
                        continue
                    entries.append(
                        ManifestEntry(
                            file_name=source.name,
                            metadata={"font_name": font_name, "family": family},
                        )
                    )
                self.console.print(f"[green]Gathered font family: {family}")

        self._finish_folder(folder, entries)

    def _finish_folder(self, folder: Path, entries: List[ManifestEntry]) -> None:
        """Write the manifest and drop files no longer referenced by it."""
        if not entries and not folder.exists():
            return
        keep = {entry.file_name for entry in entries} | {MANIFEST_NAME}
        for stale in folder.iterdir() if folder.exists() else []:
            if stale.is_file() and stale.name not in keep:
                stale.unlink()
                logger.debug("Removed stale snapshot file %s", stale)
        if entries:
            write_manifest(folder, entries)
        else:
            (folder / MANIFEST_NAME).unlink(missing_ok=True)
            if not any(folder.iterdir()):
                folder.rmdir()

    def _gather_extensions(self, destination: Path) -> None:
        manifest_path = self.extensions_manifest_path
        if not manifest_path.is_file():
            logger.info("No extensions manifest at %s", manifest_path)
            self.console.print(f"[yellow]No extensions manifest found at {manifest_path}")
            return
        try:
            text = manifest_path.read_bytes().decode("utf-8")
            ids = parse_extension_ids(json.loads(text))
        except (OSError, ValueError) as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueError
            logger.error("Cannot read extensions manifest %s: %s", manifest_path, e)
            self.report_issue(f"Skipping extensions, manifest unreadable: {e}")
            return

        listing = "".join(f"{ext_id}\n" for ext_id in ids)
        portable = self.context.templater.to_portable(text)
        try:
            self.write_snapshot_bytes(listing.encode("utf-8"), destination / EXTENSIONS_LIST_NAME)
            self.write_snapshot_bytes(portable.encode("utf-8"), destination / EXTENSIONS_JSON_NAME)
        except OSError as e:
            logger.error("Failed to write extension lists: %s", e)
            self.report_issue(f"Error writing extension lists: {e}")
            return
        self.console.print(f"[green]Gathered {len(ids)} extensions")

    # Install

    def install(self, source: Path) -> ModuleOutcome:
        try:
            self.ensure_program()
        except UserDeclinedError as e:
            logger.info("%s skipped: %s", self.name, e)
            self.console.print(f"[yellow]Skipped {self.name}")
            return ModuleOutcome.SKIPPED
        except ExternalToolError as e:
            logger.error("%s: %s", self.name, e)
            self.console.print(f"[red]Error installing {self.name}: {e}")
            return ModuleOutcome.FAILED

        self._install_fonts(source / FONTS_FOLDER)
        self._install_assets(source / ASSETS_FOLDER)

        outcome = self._install_settings(source / SETTINGS_NAME)
        if outcome != ModuleOutcome.SUCCEEDED:
            self.console.print("[yellow]Settings were not applied, skipping extensions")
            return outcome

        self._install_extensions(source / EXTENSIONS_LIST_NAME)
        return ModuleOutcome.SUCCEEDED

    def _read_manifest(self, folder: Path) -> List[ManifestEntry]:
        try:
            return read_manifest(folder)
        except (ParseError, OSError) as e:
            logger.error("Cannot read manifest in %s: %s", folder, e)
            self.report_issue(f"Error reading manifest: {e}")
            return []

    def _install_fonts(self, folder: Path) -> None:
        entries = self._read_manifest(folder)
        if not entries:
            return

        try:
            installed = self.context.fonts.list_installed()
        except ExternalToolError as e:
            logger.warning("Cannot list installed fonts: %s", e)
            installed = {}

        for entry in entries:
            source = folder / entry.file_name
            font_name = entry.metadata.get("font_name", source.stem)
            if not source.is_file():
                logger.error("Font file missing from snapshot: %s", source)
                self.report_issue(f"Font file missing from snapshot: {source}")
                continue
            if font_name in installed:
                self.console.print(f"[dim]Font already installed: {font_name}")
                continue

            target = self.managed_fonts_dir / entry.file_name
            try:
                self.install_copy(source, target)
                self.context.fonts.register(font_name, target)
            except UserDeclinedError:
                self.report_issue(f"Kept existing font file {target}")
                continue
            except (ExternalToolError, OSError) as e:
                logger.error("Failed to install font %s: %s", font_name, e)
                self.report_issue(f"Error installing font {font_name}: {e}")
                continue
            self.console.print(f"[green]Installed font: {font_name}")

    def _install_assets(self, folder: Path) -> None:
        for entry in self._read_manifest(folder):
            source = folder / entry.file_name
            if not source.is_file():
                logger.error("Custom asset missing from snapshot: %s", source)
                self.report_issue(f"Custom asset missing from snapshot: {source}")
                continue
            target = self.managed_assets_dir / entry.file_name
            try:
                self.install_copy(source, target)
            except UserDeclinedError:
                self.report_issue(f"Kept existing asset {target}")
                continue
            except OSError as e:
                logger.error("Failed to install asset %s: %s", entry.file_name, e)
                self.report_issue(f"Error installing asset {entry.file_name}: {e}")
                continue
            self.console.print(f"[green]Installed asset: {entry.file_name}")

    def _install_settings(self, snapshot_path: Path) -> ModuleOutcome:
        if not snapshot_path.is_file():
            self.console.print(f"[yellow]{snapshot_path} not found in snapshot")
            return ModuleOutcome.FAILED

        data = self.render_snapshot_file(snapshot_path)
        try:
            jsonc.loads(data.decode("utf-8"), path=snapshot_path)
        except (ParseError, UnicodeDecodeError) as e:
            logger.error("Snapshot settings are invalid: %s", e)
            self.console.print(f"[red]Snapshot settings are invalid: {e}")
            line = getattr(e, "line", None) or 1
            if self.context.prompter.confirm(
                f"Open {snapshot_path} at line {line}?", default=False
            ):
                try:
                    self.context.editor.open_at(snapshot_path, line)
                except ExternalToolError as open_error:
                    self.console.print(f"[red]Could not open editor: {open_error}")
            return ModuleOutcome.FAILED

        try:
            self.install_bytes(data, snapshot_path, self.settings_path)
        except UserDeclinedError as e:
            logger.info("%s settings skipped: %s", self.name, e)
            self.console.print(f"[yellow]Skipped {self.name} settings")
            return ModuleOutcome.SKIPPED
        except OSError as e:
            logger.error("Failed to install settings: %s", e)
            self.console.print(f"[red]Error installing settings: {e}")
            return ModuleOutcome.FAILED
        return ModuleOutcome.SUCCEEDED

    def _install_extensions(self, list_path: Path) -> None:
        if not list_path.is_file():
            return
        wanted = read_extension_list(list_path)

        try:
            installed = self.context.editor.list_extensions()
        except ExternalToolError as e:
            logger.warning("Cannot list installed extensions: %s", e)
            installed = []

        missing = missing_extensions(wanted, installed)
        if not missing:
            self.console.print(f"[dim]All {len(wanted)} extensions already installed")
            return

        choice = self.context.prompter.choose(
            f"{len(missing)} of {len(wanted)} extensions are not installed.",
            ["Install missing extensions", "Skip extensions"],
            0,
        )
        if choice != 0:
            self.console.print("[yellow]Skipped extensions")
            return

        failed: List[str] = []
        with Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            console=self.console,
        ) as progress:
            task_id = progress.add_task("Installing extensions", total=len(missing))
            for ext_id in missing:
                progress.update(task_id, description=f"Installing {ext_id}")
                try:
                    returncode = self.context.editor.install_extension(ext_id)
                except ExternalToolError as e:
                    logger.error("Failed to install extension %s: %s", ext_id, e)
                    returncode = None
                if returncode != 0:
                    failed.append(ext_id)
                progress.advance(task_id)

        installed_count = len(missing) - len(failed)
        self.console.print(f"[green]Installed {installed_count} extensions")
        if failed:
            self.report_issue(f"Failed to install extensions: {', '.join(failed)}")

    # Status

    def status(self, source: Path) -> List[FileStatus]:
        statuses = [self.file_status(source / SETTINGS_NAME, self.settings_path)]
        for folder_name, target_dir in (
            (FONTS_FOLDER, self.managed_fonts_dir),
            (ASSETS_FOLDER, self.managed_assets_dir),
        ):
            folder = source / folder_name
            for entry in self._read_manifest(folder):
                statuses.append(
                    self.file_status(
                        folder / entry.file_name, target_dir / entry.file_name, templated=False
                    )
                )

        list_path = source / EXTENSIONS_LIST_NAME
        if list_path.is_file():
            try:
                installed = self.context.editor.list_extensions()
            except ExternalToolError as e:
                logger.warning("Cannot list installed extensions: %s", e)
            else:
                missing = missing_extensions(read_extension_list(list_path), installed)
                state = FileState.DIFFERS if missing else FileState.IDENTICAL
                statuses.append(FileStatus(list_path, self.extensions_manifest_path, state))
        return statuses
