"""Base controller classes."""

from kubevigil.controllers.base.base_controller import (
    AsyncControllerMixin,
    BaseController,
    CycleResult,
)

__all__ = ["AsyncControllerMixin", "BaseController", "CycleResult"]
