"""
Fake-data engine configuration: option record and presets.

Options are passed explicitly to each generation call; there is no
process-wide option state.
"""

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


@dataclass
class FakerOptions:
    """Option record for FakeDataEngine. Defaults follow json-schema-faker."""
    default_invalid_type_product: Any = None
    prune_properties: List[str] = field(default_factory=list)
    ignore_properties: List[str] = field(default_factory=list)
    ignore_missing_refs: bool = False
    fail_on_invalid_types: bool = True
    fail_on_invalid_format: bool = True
    always_fake_optionals: bool = False
    optionals_probability: Optional[float] = None
    fixed_probabilities: bool = False
    use_examples_value: bool = False
    use_default_value: bool = False
    required_only: bool = False
    min_items: int = 0
    max_items: Optional[int] = None
    min_length: int = 0
    max_length: Optional[int] = None
    ref_depth_min: int = 0
    ref_depth_max: int = 3
    omit_nulls: bool = False
    seed: Optional[int] = None

    # Upper bounds used when a schema leaves lengths open
    array_length_cap: int = 5
    string_length_cap: int = 24

    @classmethod
    def defaults(cls) -> "FakerOptions":
        """The engine's stock option record."""
        return cls()

    @classmethod
    def mocking(cls, **overrides: Any) -> "FakerOptions":
        """
        Options used when generating mock responses.

        Always fakes optional properties and tolerates broken schemas
        instead of failing the whole response.
        """
        options = cls(
            fail_on_invalid_types=False,
            fail_on_invalid_format=False,
            always_fake_optionals=True,
            optionals_probability=1.0,
            fixed_probabilities=True,
            ignore_missing_refs=True,
        )
        return replace(options, **overrides) if overrides else options

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["FakerOptions"] = None) -> "FakerOptions":
        """Override fields of `base` (mocking preset by default) from a dictionary."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown faker options: {unknown}")
        return replace(base or cls.mocking(), **data)

    @classmethod
    def load(cls, path: Path) -> "FakerOptions":
        """Load option overrides from a YAML or JSON file."""
        with open(path, "r") as f:
            if Path(path).suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
