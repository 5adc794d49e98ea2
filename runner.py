import toml
import sys
import os
import logging
import argparse

from toml import TomlDecodeError

from plagiarism import PlagiarismDetector


def get_configuration_paths(files: list[str]) -> list[str]:
    """
    Returns a list of configuration paths to look for configuration files
    :return: List of paths to check
    """
    configuration_paths = []
    for file in files:
        if os.path.isfile(file):
            configuration_paths.append(file)

    configuration_paths.append(str(os.path.join(os.getcwd(), "plagiarism-detector.toml")))

    if os.environ.get("HOME", None) is not None:
        configuration_paths.append(os.path.join(os.environ["HOME"], ".plagiarism-detector.rc"))

    configuration_paths.append("/etc/default/plagiarism-detector.conf")
    return configuration_paths


def load_configurations(files: list[str]) -> list[dict]:
    """
    Load all existing configuration files, highest priority first
    :param files: Configuration files given on the command line
    :return: Parsed configurations
    """
    configs = []
    for configuration_path in get_configuration_paths(files):
        if os.path.isfile(configuration_path):
            try:
                logging.debug(f"Loading configuration from {configuration_path}")
                config = toml.load(configuration_path)
                configs.append(config)
            except TomlDecodeError as tde:
                logging.error("File %s is not a valid toml: %s" %(configuration_path, tde.msg))
                sys.exit(1)
    return configs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Detect near-duplicate text documents by fingerprinting")
    parser.add_argument("-e", "--environment", help="Runtime environment (prod by default)",
                        default="prod", action="store", type=str)
    parser.add_argument("-d", "--documents", help="Document file, directory or listing (repeatable)",
                        default=[], action="append", type=str)
    parser.add_argument("-o", "--output", help="Base name of the report file",
                        default=None, action="store", type=str)
    parser.add_argument("-f", "--format", help="Report format",
                        default=None, choices=["json", "markdown", "html"])
    parser.add_argument("-t", "--threshold", help="Plagiarism threshold between 0 and 1",
                        default=None, action="store", type=float)
    parser.add_argument('config_files', nargs='*')
    return parser


def main(argv=None) -> int:
    arguments = build_parser().parse_args(argv)

    configs = load_configurations(arguments.config_files)

    # Command line options take precedence over all configuration files
    overrides = {'general': {}, 'plagiarism_detection': {}}
    if arguments.documents:
        overrides['general']['documents'] = arguments.documents
    if arguments.output:
        overrides['general']['output'] = arguments.output
    if arguments.format:
        overrides['general']['format'] = arguments.format
    if arguments.threshold is not None:
        overrides['plagiarism_detection']['threshold'] = arguments.threshold
    configs.insert(0, overrides)

    detector = PlagiarismDetector(configs, arguments.environment)
    detector.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
