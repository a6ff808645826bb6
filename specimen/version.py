PACKAGE = "specimen"
VERSION = "0.1.0"
WEBSITE = "https://github.com/specimen-dev/specimen"
LICENSE = "GNU GPL v2"
