# engine.py
import os
import sys
import logging
import subprocess
from pathlib import Path
from typing import List

MACOS_SCRIPT = '''
tell application "System Events"
    repeat with d in desktops
        set picture of d to "{path}"
    end repeat
end tell
'''

KDE_SCRIPT = (
    "var all = desktops();"
    "for (var i = 0; i < all.length; i++) {{"
    " var d = all[i]; d.wallpaperPlugin = 'org.kde.image';"
    " d.currentConfigGroup = Array('Wallpaper', 'org.kde.image', 'General');"
    " d.writeConfig('Image', '{uri}'); }}"
)


class WallpaperEngine:
    """Applies an image as the desktop wallpaper on the current platform"""

    def __init__(self):
        self.platform: str = sys.platform
        self.logger = logging.getLogger("suncycle.engine")

    def set_wallpaper(self, image_path: Path) -> bool:
        """Returns True on success, False on failure"""
        image_path = Path(image_path).expanduser().resolve()
        if not image_path.is_file():
            self.logger.error(f"💀 Image not found: {image_path}")
            return False

        self.logger.debug(f"🔁 Setting wallpaper to {image_path}")

        if self.platform == "win32":
            applied = self._set_windows_wallpaper(image_path)
        elif self.platform == "darwin":
            applied = self._run(["osascript", "-e", MACOS_SCRIPT.format(path=image_path)])
        elif self.platform.startswith("linux"):
            applied = self._set_linux_wallpaper(image_path)
        else:
            self.logger.error(f"💀 Unsupported platform: {self.platform}")
            return False

        if applied:
            self.logger.info(f"✅ Wallpaper set to {image_path.name}")
        return applied

    def _run(self, command: List[str]) -> bool:
        try:
            subprocess.run(command, check=True, capture_output=True)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.error(f"💀 {command[0]} failed: {e}")
            return False

    def _set_windows_wallpaper(self, path: Path) -> bool:
        try:
            import ctypes
            SPI_SETDESKWALLPAPER = 20
            SPIF_UPDATE_AND_SEND = 3
            ok = ctypes.windll.user32.SystemParametersInfoW(
                SPI_SETDESKWALLPAPER, 0, str(path), SPIF_UPDATE_AND_SEND
            )
        except (AttributeError, OSError) as e:
            self.logger.error(f"💀 Windows API error: {e}")
            return False

        if not ok:
            self.logger.error("💀 Windows rejected the wallpaper")
        return bool(ok)

    def _set_linux_wallpaper(self, path: Path) -> bool:
        """GNOME (light and dark keys), KDE Plasma, then feh for bare X11"""
        uri = path.as_uri()

        if self._desktop_is("GNOME"):
            return all(
                self._run(["gsettings", "set", "org.gnome.desktop.background", key, uri])
                for key in ("picture-uri", "picture-uri-dark")
            )

        if self._desktop_is("KDE"):
            return self._run([
                "dbus-send", "--session", "--dest=org.kde.plasmashell",
                "--type=method_call", "/PlasmaShell",
                "org.kde.PlasmaShell.evaluateScript",
                "string:" + KDE_SCRIPT.format(uri=uri),
            ])

        return self._run(["feh", "--bg-fill", str(path)])

    def _desktop_is(self, name: str) -> bool:
        return name in os.environ.get("XDG_CURRENT_DESKTOP", "").upper()
