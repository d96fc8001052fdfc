"""Android SDK, system image and emulator provisioning for test projects."""

__version__ = "0.1.0"
