import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any
from kubernix.errors import IoFailure

if TYPE_CHECKING:
    from kubernix.local.config import Config

log = logging.getLogger(__name__)


def prepare_component_dir(config: "Config", name: str, command: str) -> Path:
    """
    Creates the working directory of a component below the runtime root.

    :param config: The configuration providing the runtime root.
    :param name: The directory name of the component.
    :param command: The component's program, used in error messages.
    :return: The created directory.
    """
    directory = config.root / name
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoFailure(command, f"Unable to create directory '{directory}': {e}") from e
    return directory


def write_config_file(directory: Path, command: str, template: str, **values: Any) -> Path:
    """
    Renders a configuration template and writes it as `config.yml`.

    :param directory: The working directory of the component.
    :param command: The component's program, used in error messages.
    :param template: A `str.format` template from the settings module.
    :param values: The values substituted into the template.
    :return: The path of the written file.
    """
    config_file = directory / "config.yml"
    try:
        rendered = template.format(**{key: str(value) for key, value in values.items()})
    except (KeyError, IndexError) as e:
        raise IoFailure(command, f"Unable to render configuration: missing value {e}") from e
    try:
        config_file.write_text(rendered)
    except OSError as e:
        raise IoFailure(command, f"Unable to write '{config_file}': {e}") from e
    log.debug(f"Configuration for '{command}' written to {config_file}")
    return config_file
