"""Android SDK provisioning pipeline.

Runs the fixed install sequence (SDK home, command-line tools, licenses and
skins, common packages, system images, apksigner, helper scripts, emulators)
against injected collaborators. Side-effects on the terminal go through
`ProvisioningHooks`, so the pipeline is usable from the CLI and from tests.

Every collaborator call is checked right after it returns; a fatal condition
raises `ProvisioningError` and nothing after it runs.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from pydantic import ValidationError

from android_setup.adapters.script_exporter import (
    export_run_emulator_script,
    export_show_devices_script,
    list_run_emulator_scripts,
)
from android_setup.core.config import AppSettings
from android_setup.core.domain.models import EmulatorCatalog, EmulatorProduct, HttpResult, ProcessOutcome
from android_setup.core.errors import CatalogError, DownloadError, MissingArtifactError, ProcessFailedError
from android_setup.core.interfaces.process import ProcessRunner
from android_setup.core.interfaces.prompt import PromptSource
from android_setup.core.interfaces.transfer import ArchiveExtractor, Downloader
from android_setup.core.sdk_layout import APK_SIGNER_FILE, COMMON_PACKAGES, SYSTEM_IMAGES_PREFIX, SdkLayout
from android_setup.core.services.avd_config import build_overrides, patch_avd_config
from android_setup.core.services.catalog_parser import parse_package_catalog
from android_setup.core.services.selector import QUIT_TOKEN, BlankInput, InteractiveSelector, SelectionState
from android_setup.core.session import ProvisioningSession

_TRUTHY = {"true", "yes", "y", "on", "t"}


@dataclass
class ProvisioningHooks:
    """Optional callbacks for UI layers (log lines, listings, errors)."""

    log: Callable[[str], None] | None = None
    verbose: Callable[[str], None] | None = None
    error: Callable[[str], None] | None = None
    show_system_images: Callable[[Sequence[str]], None] | None = None
    show_emulators: Callable[[EmulatorCatalog], None] | None = None
    show_installed_images: Callable[[Sequence[str]], None] | None = None


@dataclass
class ProvisioningResult:
    """Output of a pipeline invocation."""

    completed: bool
    system_images: list[str] = field(default_factory=list)
    avds: list[str] = field(default_factory=list)
    scripts: list[Path] = field(default_factory=list)


def to_boolean(answer: str) -> bool:
    return answer.strip().lower() in _TRUTHY


class ProvisioningPipeline:
    def __init__(
        self,
        session: ProvisioningSession,
        *,
        downloader: Downloader,
        extractor: ArchiveExtractor,
        runner: ProcessRunner,
        prompt_source: PromptSource,
        settings: AppSettings | None = None,
        layout: SdkLayout | None = None,
        hooks: ProvisioningHooks | None = None,
        temp_dir: Path | None = None,
    ) -> None:
        self._session = session
        self._settings = settings or AppSettings()
        self._layout = layout or SdkLayout.from_settings(self._settings)
        self._downloader = downloader
        self._extractor = extractor
        self._runner = runner
        self._prompt = prompt_source
        self._hooks = hooks or ProvisioningHooks()
        self._temp_dir = temp_dir or Path(tempfile.gettempdir())

    @property
    def session(self) -> ProvisioningSession:
        return self._session

    # ------------------------------------------------------------------
    # reporting
    # ------------------------------------------------------------------

    def _log(self, message: str) -> None:
        if self._hooks.log:
            self._hooks.log(message)

    def _verbose(self, message: str) -> None:
        if self._session.verbose and self._hooks.verbose:
            self._hooks.verbose(message)

    def _error(self, message: str) -> None:
        if self._hooks.error:
            self._hooks.error(message)

    # ------------------------------------------------------------------
    # entry point
    # ------------------------------------------------------------------

    def run(self) -> ProvisioningResult:
        result = ProvisioningResult(completed=False)
        if not self.confirm_sdk_home():
            return result

        self._log("installing Android SDK CommandLine Tools...")
        self.install_cmdline_tools()

        self._log("installing pre-accepted license agreements (and simplified installation process)...")
        self.download_and_unzip(self._settings.license_zip_url, self._layout.license_dir)

        self._log("installing pre-packaged Android emulator skins...")
        self.download_and_unzip(self._settings.skins_zip_url, self._layout.skins_dir)

        self._log("installing common Android SDK packages...")
        self.install_common_packages()

        self._log("installing Android SDK system images...")
        result.system_images = self.install_system_images()

        self._log("setting up apksigner...")
        self.copy_apk_signer()

        self._log("creating show-android-devices script...")
        result.scripts.append(self.create_show_devices_script())

        self._log("installing Android emulators...")
        catalog = self.fetch_emulator_catalog()
        installed = self.list_installed_system_images()
        result.avds = self.install_emulators(catalog, installed)

        scripts = list_run_emulator_scripts(self._session.bin_dir)
        if scripts:
            self._log("here are the scripts currently available to start your emulators:")
            for script in scripts:
                self._log(f"\t{script}")
        result.scripts.extend(scripts)

        self._log("installation complete")
        result.completed = True
        return result

    # ------------------------------------------------------------------
    # step 1: SDK home
    # ------------------------------------------------------------------

    def confirm_sdk_home(self) -> bool:
        """Returns False when the user declines to install over an existing SDK."""

        sdk_home = self._layout.sdk_home
        if sdk_home.is_dir() and _is_read_writable(sdk_home):
            if self._session.always_override:
                self._verbose(f"(ALWAYS OVERRIDE): overriding existing Android SDK detected at {sdk_home}.")
                return True
            answer = self._prompt.read(
                f"An existing Android SDK is detected at {sdk_home}.\nDo you want to install over it?"
            )
            if not to_boolean(answer):
                self._verbose(f"existing Android SDK found at {sdk_home}; Setup cancelled.")
                return False
            return True

        self._verbose(f"creating Android SDK directory at {sdk_home}")
        sdk_home.mkdir(parents=True, exist_ok=True)
        return True

    # ------------------------------------------------------------------
    # steps 2-3: downloads
    # ------------------------------------------------------------------

    def resolve_redirection(self, url: str) -> str:
        response = self._downloader.get(url)
        if not response.ok:
            raise DownloadError(_http_failure("Unable to read from", url, response), detail=response.body or None)
        target = response.body.strip()
        if not target:
            raise DownloadError(f"ERROR: {url} did not point at any download location")
        return target

    def download_and_unzip(self, url: str, destination: Path, *, clean: Path | None = None) -> list[Path]:
        """Downloads a ZIP into the temp dir and extracts it into `destination`.

        `clean` (default: `destination`) is wiped before extraction.
        """

        save_to = self._temp_dir / url.rstrip("/").rsplit("/", 1)[-1]
        self._verbose(f"downloading from {url}...")
        response = self._downloader.download(url, save_to)
        if not response.ok:
            raise DownloadError(_http_failure("Unable to download from", url, response), detail=response.body or None)

        downloaded = response.payload_location or save_to
        if downloaded.suffix.lower() != ".zip":
            raise DownloadError(f"ERROR: File downloaded from {url} is not a ZIP file as expected!")
        self._verbose(f"downloaded to {downloaded}")

        to_clean = clean or destination
        if to_clean.exists():
            shutil.rmtree(to_clean)
        destination.mkdir(parents=True, exist_ok=True)
        extracted = self._extractor.unzip(downloaded, destination)
        self._verbose(f"unzipped {downloaded} to {destination}")
        downloaded.unlink(missing_ok=True)
        return extracted

    def install_cmdline_tools(self) -> list[Path]:
        layout = self._layout
        archive_url = self.resolve_redirection(self._settings.cmdline_tools_redirect_url)
        extracted = self.download_and_unzip(archive_url, layout.sdk_home, clean=layout.cmdline_tools_dir)
        for rel_path in (layout.avd_manager_rel_path, layout.sdk_manager_rel_path):
            if not any(rel_path in path.as_posix() for path in extracted):
                raise MissingArtifactError(f"ERROR: Unable to find {rel_path} from {layout.cmdline_tools_dir}")
        return extracted

    # ------------------------------------------------------------------
    # steps 4-5: sdkmanager
    # ------------------------------------------------------------------

    def _sdk_manager(self, *args: str) -> ProcessOutcome:
        layout = self._layout
        outcome = self._runner.invoke(
            layout.sdk_manager,
            [layout.sdk_root_option(), *args],
            layout.tool_env(),
            cwd=layout.sdk_manager.parent,
        )
        _check_outcome(outcome, f"sdkmanager {' '.join(args)}")
        return outcome

    def install_common_packages(self) -> None:
        outcome = self._sdk_manager("--install", *COMMON_PACKAGES)
        self._verbose(outcome.stdout)

    def list_available_system_images(self) -> list[str]:
        return parse_package_catalog(self._sdk_manager("--list").stdout, SYSTEM_IMAGES_PREFIX)

    def list_installed_system_images(self) -> list[str]:
        return parse_package_catalog(self._sdk_manager("--list_installed").stdout, SYSTEM_IMAGES_PREFIX)

    def install_system_images(self) -> list[str]:
        session = self._session
        images = self.list_available_system_images()
        if (
            session.default_system_image == self._settings.default_system_image_64
            and session.default_system_image not in images
        ):
            session = self._session = session.downgrade_system_image(self._settings.default_system_image_32)

        selector = InteractiveSelector(
            candidates=images,
            prompt_source=self._prompt,
            always_override=session.always_override,
            default=session.default_system_image,
            on_blank=BlankInput.USE_DEFAULT,
            unknown_message="ERROR: Unknown system images specified - {value}",
            report_error=self._error,
            show_candidates=self._show_system_images(images),
        )

        installed: list[str] = []
        while True:
            if session.always_override:
                self._log(f"(ALWAYS OVERRIDE): installing Android SDK System Image {session.default_system_image}")
            selection = selector.select(
                f"Enter the system image to install (default: {session.default_system_image}), {QUIT_TOKEN} to end:"
            )
            if selection.state is SelectionState.QUIT:
                break
            if selection.accepted and selection.value:
                outcome = self._sdk_manager("--install", selection.value)
                self._verbose(outcome.stdout)
                installed.append(selection.value)
            # one pass is enough in always-override mode
            if session.always_override:
                break
        return installed

    def _show_system_images(self, images: Sequence[str]) -> Callable[[], None] | None:
        show = self._hooks.show_system_images
        if show is None:
            return None
        return lambda: show(images)

    # ------------------------------------------------------------------
    # steps 6-7: apksigner, show-devices script
    # ------------------------------------------------------------------

    def copy_apk_signer(self) -> Path:
        build_tools = self._layout.build_tools_dir
        candidates = sorted(build_tools.rglob(APK_SIGNER_FILE)) if build_tools.is_dir() else []
        if not candidates:
            raise MissingArtifactError(f"ERROR: Unable to find {APK_SIGNER_FILE} under {build_tools}")

        dest = self._layout.apk_signer_dest
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(candidates[0], dest)
        self._verbose(f"copied {APK_SIGNER_FILE} to {dest}")
        return dest

    def create_show_devices_script(self) -> Path:
        script = export_show_devices_script(
            bin_dir=self._session.bin_dir,
            sdk_rel_path=self._layout.sdk_rel_path,
            script_ext=self._layout.script_ext,
        )
        self._verbose(f"created show-android-devices script: {script}")
        return script

    # ------------------------------------------------------------------
    # step 8: emulators
    # ------------------------------------------------------------------

    def fetch_emulator_catalog(self) -> EmulatorCatalog:
        url = self._settings.emulators_url
        response = self._downloader.get(url)
        if not response.ok:
            raise DownloadError(_http_failure("Unable to download from", url, response), detail=response.body or None)
        try:
            return EmulatorCatalog.model_validate_json(response.body)
        except ValidationError as exc:
            raise CatalogError(f"ERROR: Invalid emulator catalog from {url}", detail=str(exc)) from exc

    def install_emulators(self, catalog: EmulatorCatalog, installed_images: Sequence[str]) -> list[str]:
        session = self._session
        show = self._hooks.show_emulators
        selector = InteractiveSelector(
            candidates=catalog.products_by_id,
            prompt_source=self._prompt,
            always_override=session.always_override,
            default=session.default_avd_name,
            on_blank=BlankInput.NO_INPUT,
            unknown_message="ERROR: Unrecognized emulator id specified - {value}",
            report_error=self._error,
            show_candidates=(lambda: show(catalog)) if show else None,
        )

        created: list[str] = []
        while True:
            if session.always_override:
                self._log(f"(ALWAYS OVERRIDE): installing emulator {session.default_avd_name}...")
            selection = selector.select(f"Enter the emulator id to install it, or {QUIT_TOKEN} to end:")
            if selection.state is SelectionState.QUIT:
                break
            if selection.accepted and selection.value:
                product = catalog.find(selection.value)
                if product is None:
                    continue
                image = self.select_emulator_system_image(installed_images)
                if image is None:
                    break
                self.create_avd(product, image)
                created.append(product.id)
            if session.always_override:
                break
        return created

    def select_emulator_system_image(self, installed_images: Sequence[str]) -> str | None:
        """None when the user quits (or the default image is not installed)."""

        session = self._session
        if session.always_override:
            self._log(f"installing {session.default_system_image} for this emulator")
        elif self._hooks.show_installed_images:
            self._hooks.show_installed_images(installed_images)

        selector = InteractiveSelector(
            candidates=installed_images,
            prompt_source=self._prompt,
            always_override=session.always_override,
            default=session.default_system_image,
            on_blank=BlankInput.UNKNOWN,
            unknown_message="ERROR: Invalid system image - {value}",
            report_error=self._error,
        )
        selection = selector.select(f"Enter the system image to use for this emulator, or {QUIT_TOKEN} to end:")
        return selection.value if selection.accepted else None

    def create_avd(self, product: EmulatorProduct, system_image: str) -> Path:
        layout = self._layout
        outcome = self._runner.invoke(
            layout.avd_manager,
            ["create", "avd", "-n", product.id, "-k", system_image],
            layout.tool_env(),
            cwd=layout.avd_manager.parent,
            # answers "Do you wish to create a custom hardware profile? [no]"
            input_text="\n",
        )
        _check_outcome(outcome, f"avdmanager create avd -n {product.id}")
        self._verbose(f"created avd {product.id}")

        config_ini = layout.avd_config(product.id)
        if not config_ini.is_file():
            raise MissingArtifactError(f"ERROR: Unable to find {config_ini} for avd {product.id}")
        patch_avd_config(
            config_ini,
            additions=build_overrides(
                product,
                skins_dir=layout.skins_dir,
                ram_size=self._settings.avd_ram_size,
                lcd_density=self._settings.avd_lcd_density,
            ),
        )
        self._verbose(f"updated {config_ini}")

        script = export_run_emulator_script(
            bin_dir=self._session.bin_dir,
            avd_id=product.id,
            skin=product.skin,
            sdk_rel_path=layout.sdk_rel_path,
            script_ext=layout.script_ext,
        )
        self._verbose(f"created emulator script: {script}")
        return script


def _is_read_writable(path: Path) -> bool:
    return os.access(path, os.R_OK | os.W_OK)


def _http_failure(prefix: str, url: str, response: HttpResult) -> str:
    return f"ERROR: {prefix} {url}: {response.return_code} {response.status_text}".rstrip()


def _check_outcome(outcome: ProcessOutcome, what: str) -> None:
    if outcome.failed:
        raise ProcessFailedError(f"ERROR: {what} reported an error", detail=outcome.stderr.strip())
