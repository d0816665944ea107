import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Mapping, MutableMapping, Optional

from .models.pipeline import Pipeline
from .pipeline import assemble_week_over_week

log = logging.getLogger(__name__)

PROPERTY_SEPARATOR = ';'
KEY_VALUE_SEPARATOR = '='


@dataclass
class AnomalyFunctionSpec:
    """Raw description of an anomaly function as it is stored and configured."""
    function_name: str
    metric: str

    # "key=value;key=value" string, e.g. "baseline-spec=Wo2W;enable-smoothing=true"
    properties: Optional[str] = None

    is_active: bool = True


def load_properties(text: Optional[str]) -> Dict[str, str]:
    """
    Parses a "key=value;key=value" properties string into an ordered dict.

    Entries are stripped and empty entries skipped. An entry without "=" becomes
    a key with an empty value, which is enough for presence flags.
    """
    properties: Dict[str, str] = {}
    if not text:
        return properties

    for entry in text.split(PROPERTY_SEPARATOR):
        entry = entry.strip()
        if not entry:
            continue
        key, _, value = entry.partition(KEY_VALUE_SEPARATOR)
        properties[key.strip()] = value.strip()

    return properties


def dump_properties(properties: Mapping[str, str]) -> str:
    return PROPERTY_SEPARATOR.join(f"{key}{KEY_VALUE_SEPARATOR}{value}" for key, value in properties.items())


class AnomalyFunction:
    """
    An anomaly function instance: a properties snapshot and the pipeline built from it.

    The pipeline is produced by the configure strategy handed to the constructor.
    Initialization must finish before the instance is shared between threads.
    """

    def __init__(self, configure: Callable[[MutableMapping[str, str]], Pipeline] = assemble_week_over_week):
        self.configure = configure
        self.spec: Optional[AnomalyFunctionSpec] = None
        self.properties: Mapping[str, str] = MappingProxyType({})
        self.pipeline: Optional[Pipeline] = None

    @property
    def is_initialized(self) -> bool:
        return self.pipeline is not None

    def init(self, spec: AnomalyFunctionSpec) -> None:
        """
        Initializes the function from its raw spec.

        Args:
            spec: The spec whose properties string configures the pipeline

        Raises:
            ValueError: If spec is None or a stage rejects the properties
        """
        if spec is None:
            raise ValueError("Anomaly function spec must not be None")

        self.spec = spec
        self.init_properties(load_properties(spec.properties))

    def init_properties(self, properties: MutableMapping[str, str]) -> None:
        """
        Builds the pipeline from properties, which may be mutated along the way.

        Args:
            properties: The function's properties

        Raises:
            ValueError: If properties is None or a stage rejects them
        """
        if properties is None:
            raise ValueError("Anomaly function properties must not be None")

        self.pipeline = None
        self.properties = MappingProxyType({})
        pipeline = self.configure(properties)

        self.properties = MappingProxyType(dict(properties))
        self.pipeline = pipeline
        log.debug("Initialized anomaly function %s", self.spec.function_name if self.spec else '<unnamed>')


def week_over_week_rule() -> AnomalyFunction:
    """Anomaly function comparing the current window with prior weeks."""
    return AnomalyFunction(configure=assemble_week_over_week)
