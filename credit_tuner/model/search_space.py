# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# -*- coding: utf-8 -*-
# =============================================================================
# SCRIPT  : search_space.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Bounded hyperparameter search space for Bayesian tuning.
#
# CREATED : 2025-10-18
# UPDATED : 2025-10-18
# =============================================================================

"""
Search-space definition for the credit_tuner classifier.

A search space maps each tunable LightGBM parameter to a closed interval.
Integer parameters (tree depth, leaf counts, ...) are searched on a
continuous scale by the optimizer and rounded back into their interval by
`SearchSpace.cast`.
"""

import math
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple, Union

from credit_tuner.utils.errors import ConfigurationInvalid, EmptySearchSpace

Number = Union[int, float]


@dataclass(frozen=True)
class ParamBound:
    """Closed interval [low, high] for one hyperparameter."""

    name: str
    low: float
    high: float
    integer: bool = False

    def contains(self, value: Number) -> bool:
        return self.low <= value <= self.high

    def cast(self, value: float) -> Number:
        v = min(max(float(value), self.low), self.high)
        if self.integer:
            # nearest integer that still lies inside the interval
            v = int(round(v))
            return int(min(max(v, math.ceil(self.low)), math.floor(self.high)))
        return v


@dataclass(frozen=True)
class SearchSpace:
    params: Tuple[ParamBound, ...]

    @classmethod
    def from_bounds(cls, bounds: Mapping[str, Tuple[float, float, bool]]) -> "SearchSpace":
        """Build a space from `{name: (low, high, is_integer)}`."""
        return cls(tuple(ParamBound(n, lo, hi, bool(i)) for n, (lo, hi, i) in bounds.items()))

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.params)

    def validate(self) -> None:
        """
        Check the space before any evaluation.

        Raises
        ------
        EmptySearchSpace
            If there are no parameters, a name repeats, a bound is not finite,
            an integer interval holds no integer, or lower > upper.
        """
        if not self.params:
            raise EmptySearchSpace("Search space has no parameters")

        names = self.names
        if len(set(names)) != len(names):
            raise EmptySearchSpace(f"Duplicate parameter names in search space: {names!r}")

        for p in self.params:
            if not (math.isfinite(p.low) and math.isfinite(p.high)):
                raise EmptySearchSpace(
                    f"Bounds of '{p.name}' must be finite", details={"param": p.name}
                )
            if p.low > p.high:
                raise EmptySearchSpace(
                    f"Lower bound of '{p.name}' exceeds its upper bound: {p.low} > {p.high}",
                    details={"param": p.name, "low": p.low, "high": p.high},
                )
            if p.integer and math.ceil(p.low) > math.floor(p.high):
                raise EmptySearchSpace(
                    f"Interval of integer parameter '{p.name}' holds no integer",
                    details={"param": p.name, "low": p.low, "high": p.high},
                )

    def pbounds(self) -> Dict[str, Tuple[float, float]]:
        """Continuous bounds in the form expected by `bayes_opt`."""
        return {p.name: (float(p.low), float(p.high)) for p in self.params}

    def cast(self, raw: Mapping[str, float]) -> Dict[str, Number]:
        """Turn a point proposed by the optimizer into a configuration."""
        return {p.name: p.cast(raw[p.name]) for p in self.params}

    def normalize(self, config: Mapping[str, Number]) -> Dict[str, Number]:
        """
        Check `config` and return a copy with native int/float values.

        Whole-number floats of integer parameters (e.g. `max_depth=3.0`)
        become ints, which LightGBM requires.
        """
        self.check(config)
        return {
            p.name: int(config[p.name]) if p.integer else float(config[p.name])
            for p in self.params
        }

    def check(self, config: Mapping[str, Number]) -> None:
        """
        Raise ConfigurationInvalid unless `config` lies inside the space.

        The configuration must name every parameter exactly once, hold finite
        values inside the closed intervals, and integral values for integer
        parameters.
        """
        missing = [n for n in self.names if n not in config]
        extra = [n for n in config if n not in self.names]
        if missing or extra:
            raise ConfigurationInvalid(
                f"Configuration keys do not match the search space "
                f"(missing: {missing}, unexpected: {extra})",
                details={"missing": missing, "unexpected": extra},
            )

        for p in self.params:
            value = config[p.name]
            try:
                if isinstance(value, (bool, str)):
                    raise TypeError(type(value).__name__)
                value = float(value)
            except (TypeError, ValueError) as exc:
                raise ConfigurationInvalid(
                    f"'{p.name}' must be numeric, got {value!r}",
                    details={"param": p.name},
                ) from exc
            if not math.isfinite(value) or not p.contains(value):
                raise ConfigurationInvalid(
                    f"'{p.name}' = {value} is outside [{p.low}, {p.high}]",
                    details={"param": p.name, "value": value},
                )
            if p.integer and not value.is_integer():
                raise ConfigurationInvalid(
                    f"'{p.name}' must be an integer, got {value}",
                    details={"param": p.name, "value": value},
                )
