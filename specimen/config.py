import configparser
import pathlib
from configparser import NoOptionError, NoSectionError
from io import StringIO
from os import getenv
from os.path import exists as path_exists
from os.path import join as path_join

DEFAULTS = {
    "synthesis_counter_start": 1,
    "synthesis_text_prefix": "sampleValue",
    "synthesis_bytes_prefix": "sample byte data",
    "tempfile_prefix": "tempFileForCheck",
    "tempfile_suffix": ".zip",
    "filters_config": "",
    "filters_mode": "blacklist",
    "filters_verbose": False,
}

HELP = {
    "synthesis_counter_start": "First value of the scalar counter after a reset",
    "synthesis_text_prefix": "Prefix of synthesized strings",
    "synthesis_bytes_prefix": "Prefix of synthesized byte strings",
    "tempfile_prefix": "Prefix of placeholder temporary files",
    "tempfile_suffix": "Suffix of placeholder temporary files",
    "filters_config": "TOML file with property and operation filters",
    "filters_mode": "Filter mode: blacklist, whitelist or both",
    "filters_verbose": "Log every filter decision",
}


class ConfigError(Exception):
    pass


def createFilename(name=None, configdir=None):
    """Create a filename from the given name and configdir."""
    if name is None:
        name = "specimen.conf"
    if configdir is None:
        configdir = getenv("XDG_CONFIG_HOME")
        if not configdir:
            homedir = getenv("HOME")
            if not homedir:
                raise ConfigError(
                    "Unable to retrieve user home directory: empty HOME environment variable"
                )
            configdir = path_join(homedir, ".config")
    return path_join(configdir, name)


class SpecimenConfig:
    def __init__(self, filename=None, configdir=None, read=False):
        self._parser = ConfigParserWithHelp()
        self.filename = None
        if read:
            self.filename = createFilename(filename, configdir)
            if path_exists(self.filename):
                self._parser.read([self.filename])

        # Synthesis options
        self.synthesis_counter_start = self.getint(
            "synthesis", "counter_start", DEFAULTS["synthesis_counter_start"]
        )
        self.synthesis_text_prefix = self.getstr(
            "synthesis", "text_prefix", DEFAULTS["synthesis_text_prefix"]
        )
        self.synthesis_bytes_prefix = self.getstr(
            "synthesis", "bytes_prefix", DEFAULTS["synthesis_bytes_prefix"]
        )

        # Temporary file options
        self.tempfile_prefix = self.getstr(
            "tempfile", "prefix", DEFAULTS["tempfile_prefix"]
        )
        self.tempfile_suffix = self.getstr(
            "tempfile", "suffix", DEFAULTS["tempfile_suffix"]
        )

        # Filter options
        self.filters_config = self.getstr("filters", "config", DEFAULTS["filters_config"])
        self.filters_mode = self.getstr("filters", "mode", DEFAULTS["filters_mode"])
        self.filters_verbose = self.getbool(
            "filters", "verbose", DEFAULTS["filters_verbose"]
        )

    def write_sample_config(self, filename=None):
        """Render the default configuration, and write it if filename is set."""
        output = StringIO()
        parser = ConfigParserWithHelp()
        output.write("""# Specimen default configuration file\n""")
        for section_and_key, value in DEFAULTS.items():
            section, key = section_and_key.split("_", maxsplit=1)
            if section not in parser:
                parser.add_section(section)
            parser.set(section, key, str(value), HELP.get(section_and_key))
        parser.write(output)

        if filename is not None:
            config_file = pathlib.Path(filename)
            if config_file.exists():
                raise ConfigError("Configuration file already exists: %s" % filename)
            with config_file.open("w") as file:
                file.write(output.getvalue())
        return output.getvalue()

    def _gettype(self, func, type_name, section, key, default_value):
        try:
            value = func(section, key)
            if func == self._parser.get:
                value = value.strip()
            return value
        except (NoSectionError, NoOptionError):
            return default_value
        except ValueError as err:
            raise ConfigError(
                "Value %s of section %s is not %s! %s" % (key, section, type_name, err)
            )

    def getstr(self, section, key, default_value=None):
        return self._gettype(self._parser.get, "a string", section, key, default_value)

    def getbool(self, section, key, default_value):
        return self._gettype(
            self._parser.getboolean, "a boolean", section, key, default_value
        )

    def getint(self, section, key, default_value):
        return self._gettype(
            self._parser.getint, "an integer", section, key, default_value
        )

    def getfloat(self, section, key, default_value):
        return self._gettype(
            self._parser.getfloat, "a float", section, key, default_value
        )


class ConfigParserWithHelp(configparser.ConfigParser):
    """ConfigParser class which records and writes help messages."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.help = {}

    def set(self, section, option, value=None, help=None):
        super().set(section, option, value)
        if help is not None:
            if option in self.help.get(section, {}):
                raise ConfigError(
                    "Option %s of section %s already has a help message: %s"
                    % (option, section, self.help[section][option])
                )
            self.help.setdefault(section, {})[option] = help

    def add_section(self, section):
        super().add_section(section)
        self.help[section] = {}

    def _write_section(self, fp, section_name, section_items, delimiter, *args, **kwargs):
        fp.write("\n[%s]\n" % section_name)
        for key, value in section_items:
            if key in self.help.get(section_name, {}):
                fp.write("\n# %s\n" % self.help[section_name][key])

            value = self._interpolation.before_write(self, section_name, key, value)
            if value is not None or not self._allow_no_value:
                value = delimiter + str(value).replace("\n", "\n\t")
            else:
                value = ""
            fp.write("%s%s\n" % (key, value))
        fp.write("#" + "-" * 40 + "\n")
        fp.write("\n")
