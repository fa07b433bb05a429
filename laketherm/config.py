"""Reading and validating YAML configuration files."""

import os
from pathlib import Path
from typing import Any

import yaml

from laketherm.config_schema import Config
from laketherm.workflows.methods import multi_level_merge


class DetectDuplicateKeysYamlLoader(yaml.SafeLoader):
    """Custom YAML loader that detects duplicate keys in mappings.

    Raises:
        ValueError: If a duplicate key is found in the YAML mapping.
    """

    def construct_mapping(
        self, node: yaml.nodes.MappingNode, deep: bool = False
    ) -> dict:
        """Construct a mapping from a YAML node, checking for duplicate keys.

        Args:
            node: The YAML node to construct the mapping from.
            deep: Whether to perform a deep construction of the mapping. Defaults to False.

        Raises:
            ValueError: If a duplicate key is found in the YAML mapping.

        Returns:
            dict: The constructed mapping.
        """
        mapping = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in mapping:
                raise ValueError(f"Duplicate key found: {key}")
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML file with the duplicate-key-detecting loader.

    Returns:
        The parsed mapping, or an empty dict for an empty file.
    """
    with open(path, "r") as stream:
        config: dict | None = yaml.load(stream, Loader=DetectDuplicateKeysYamlLoader)
    if config is None:
        config = {}
    return config


def parse_config(
    config_path: dict | Path | str, current_directory: Path | None = None
) -> dict[str, Any]:
    """Parse config.

    This method recursively parses the config file and resolves any 'inherits' keys.
    Settings of the inheriting file take precedence over the inherited file.

    Args:
        config_path: Path to the config file or a dict with the config.
        current_directory: Current directory to resolve relative paths.
            If None, the current working directory is used.

    Returns:
        Full configuration without any remaining 'inherits' keys.
    """
    if current_directory is None:
        current_directory = Path.cwd()

    if isinstance(config_path, dict):
        config = config_path
    else:
        config = read_yaml(current_directory / config_path)
        current_directory = (current_directory / Path(config_path)).parent

    if "inherits" in config:
        # replace {VAR} or $VAR with environment variable VAR if it exists
        inherit_config_path = os.path.expandvars(
            str(config["inherits"]).format(**os.environ)
        )
        # if inherits is not an absolute path, it is relative to the config file
        if not Path(inherit_config_path).is_absolute():
            inherit_config_path = current_directory / inherit_config_path
        inherited_config = read_yaml(Path(inherit_config_path))
        current_directory = Path(inherit_config_path).parent
        del config["inherits"]  # avoid infinite recursion
        config = multi_level_merge(inherited_config, config)
        config = parse_config(config, current_directory=current_directory)
    return config


def load_config(config_path: dict | Path | str) -> Config:
    """Parse a configuration and validate it.

    Args:
        config_path: Path to the config file or a dict with the config.

    Returns:
        The validated configuration.

    Raises:
        pydantic.ValidationError: If the configuration is invalid.
    """
    return Config.model_validate(parse_config(config_path))
