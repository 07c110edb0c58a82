"""Local toolchain management: scanning, acquisition, install and switch."""
