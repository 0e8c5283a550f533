#!/usr/bin/env python3
"""
Exception classes for the solar system simulator.

Every error raised by the kernel derives from SolarSimError, which carries an
error code and a context dict so hosts can log failures uniformly.

Taxonomy
- Configuration errors: invalid config values, invalid body parameters, duplicate names.
  Raised at construction time, never coerced.
- Not-found errors: removing or looking up a body that is not registered. Non-fatal.
- Numerical errors: non-finite state after a step. Fatal for the current run;
  the host must reset the simulation.
"""
from typing import Any, Dict, Optional


class SolarSimError(Exception):
    """
    Base exception for all simulator errors.

    Provides structured error information: a stable error code and additional
    context data.
    """

    def __init__(self,
                 message: str,
                 error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }

    def __str__(self) -> str:
        parts = [f"{self.error_code}: {self.message}"]
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")
        return " | ".join(parts)


# Configuration errors
class ConfigurationError(SolarSimError):
    """Raised when there's a configuration-related error."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if config_key:
            context['config_key'] = config_key
        kwargs['context'] = context
        super().__init__(message, **kwargs)


class InvalidConfigValueError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(self, key: str, value: Any, expected: str, **kwargs):
        message = f"Invalid value '{value}' for config key '{key}'. Expected: {expected}"
        super().__init__(message, config_key=key, **kwargs)
        self.key = key
        self.value = value


class InvalidBodyError(SolarSimError):
    """Raised when a body is constructed with invalid physical parameters."""

    def __init__(self, name: str, field: str, value: Any, expected: str, **kwargs):
        message = f"Body '{name}' has invalid {field} {value!r}. Expected: {expected}"
        context = kwargs.get('context', {})
        context.update({'body': name, 'field': field})
        kwargs['context'] = context
        super().__init__(message, **kwargs)
        self.field = field


# Registry errors
class RegistryError(SolarSimError):
    """Base class for body registry errors."""
    pass


class DuplicateNameError(RegistryError):
    """Raised when a body with the same name is already registered."""

    def __init__(self, name: str, **kwargs):
        context = kwargs.get('context', {})
        context['body'] = name
        kwargs['context'] = context
        super().__init__(f"A body named '{name}' already exists", **kwargs)
        self.name = name


class BodyNotFoundError(RegistryError):
    """Raised when a body is not present in the registry."""

    def __init__(self, name: str, **kwargs):
        context = kwargs.get('context', {})
        context['body'] = name
        kwargs['context'] = context
        super().__init__(f"Body '{name}' is not registered", **kwargs)
        self.name = name


# Simulation errors
class PilotStateError(SolarSimError):
    """Raised when a pilot-mode operation is invalid in the current state."""
    pass


class NumericalInstabilityError(SolarSimError):
    """Raised when a step leaves a body with non-finite position or velocity."""

    def __init__(self, body_name: str, **kwargs):
        context = kwargs.get('context', {})
        context['body'] = body_name
        kwargs['context'] = context
        super().__init__(f"Non-finite state detected on body '{body_name}'; reset required", **kwargs)
        self.body_name = body_name
