"""bundle-license: license banners and third-party reports for JavaScript bundles."""

from .core import LicensePlugin, license_plugin
from .models import Dependency, Person

__all__ = ["Dependency", "LicensePlugin", "Person", "license_plugin"]
