# seriesfit/workspace.py
"""
Caller-owned registry of series and models.

A Workspace holds the series a caller has loaded and the models computed
from them, tracks which of each is selected, and walks an explicit state
machine while long-running work (loading, calculating, saving) is in flight.
Nothing here knows about file formats, databases or UI; loaders and writers
are plain callables supplied by the caller.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Iterator, Mapping

from seriesfit.core.exceptions import (
    DegenerateInput,
    InvalidArgument,
    InvalidState,
    ModelNotFound,
    SeriesNotFound,
)
from seriesfit.core.series import SeriesLike
from seriesfit.models import AnyModel, Model, ModelKind, build_model


logger = logging.getLogger(__name__)


class State(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"
    SAVING = "saving"
    SAVED = "saved"
    CALCULATING = "calculating"


TRANSITIONS: dict[State, frozenset[State]] = {
    State.IDLE: frozenset({State.LOADING, State.SAVING, State.CALCULATING}),
    State.LOADING: frozenset({State.LOADED, State.ERROR, State.IDLE}),
    State.SAVING: frozenset({State.SAVED, State.ERROR, State.IDLE}),
    State.CALCULATING: frozenset({State.ERROR, State.IDLE}),
    State.LOADED: frozenset({State.IDLE}),
    State.SAVED: frozenset({State.IDLE}),
    State.ERROR: frozenset({State.IDLE}),
}


@dataclass(slots=True)
class Workspace:
    """
    Registry of named series and models.

    Design goals:
    - dict-like access to series: ws["prices"]
    - explicit state: every transition is validated and kept in `history`
    - failures are recorded (`error_flag`, `error_message`) and re-raised
    """
    series: dict[str, SeriesLike] = field(default_factory=dict, repr=False)
    models: dict[str, AnyModel] = field(default_factory=dict, repr=False)

    state: State = field(default=State.IDLE, init=False)
    selected_series: SeriesLike | None = field(default=None, init=False)
    selected_model: AnyModel | None = field(default=None, init=False)
    error_flag: bool = field(default=False, init=False)
    error_message: str = field(default="", init=False)
    history: list[tuple[State, State]] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.series, Mapping):
            raise InvalidArgument("Workspace.series must be a mapping (e.g., dict).")
        if not isinstance(self.models, Mapping):
            raise InvalidArgument("Workspace.models must be a mapping (e.g., dict).")

        normalized: dict[str, SeriesLike] = {}
        for key, s in self.series.items():
            if not isinstance(s, SeriesLike):
                raise InvalidArgument("Workspace.series values must be Series-like objects.")
            if s.name != key:
                raise InvalidArgument(f"Series name mismatch: key '{key}' but Series.name is '{s.name}'.")
            normalized[key] = s

        models: dict[str, AnyModel] = {}
        for key, m in self.models.items():
            if not isinstance(m, Model):
                raise InvalidArgument("Workspace.models values must implement Model.")
            if m.name != key:
                raise InvalidArgument(f"Model name mismatch: key '{key}' but Model.name is '{m.name}'.")
            models[key] = m

        self.series = normalized
        self.models = models

    # ---- state machine ----
    @property
    def is_busy(self) -> bool:
        return self.state in (State.LOADING, State.CALCULATING)

    def change_state(self, new_state: State) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise InvalidState(f"Cannot move from {self.state.value} to {new_state.value}.")
        logger.debug("Workspace state %s -> %s", self.state.value, new_state.value)
        self.history.append((self.state, new_state))
        self.state = new_state

    def clear_error(self) -> None:
        self.error_flag = False
        self.error_message = ""

    def _record_error(self, message: str) -> None:
        self.error_flag = True
        self.error_message = message

    @contextmanager
    def _operation(self, busy: State, done: State | None, what: str) -> Iterator[None]:
        self.change_state(busy)
        try:
            yield
        except Exception as e:
            self.change_state(State.ERROR)
            self._record_error(f"Error {what}: {e}")
            logger.error("Error %s: %s", what, e)
            raise
        else:
            if done is not None:
                self.change_state(done)
        finally:
            self.change_state(State.IDLE)

    # ---- dict-like API over series ----
    def __len__(self) -> int:
        return len(self.series)

    def __iter__(self) -> Iterator[str]:
        return iter(self.series)

    def __contains__(self, name: object) -> bool:
        return name in self.series

    def __getitem__(self, name: str) -> SeriesLike:
        try:
            return self.series[name]
        except KeyError as e:
            raise SeriesNotFound(name) from e

    def get_series(self, name: str, default: SeriesLike | None = None) -> SeriesLike | None:
        return self.series.get(name, default)

    def series_names(self) -> list[str]:
        return list(self.series)

    def add_series(self, series: SeriesLike, *, overwrite: bool = False, select: bool = True) -> None:
        """
        Register `series` under its name and (by default) select it.

        If overwrite=False and the name is taken, raises InvalidArgument.
        """
        if not isinstance(series, SeriesLike):
            raise InvalidArgument("add_series() expects a Series-like object.")
        if series.name in self.series and not overwrite:
            raise InvalidArgument(f"Series '{series.name}' already exists (overwrite=False).")
        self.series[series.name] = series
        if select:
            self.selected_series = series

    def remove_series(self, name: str) -> bool:
        s = self.series.pop(name, None)
        if s is None:
            return False
        if self.selected_series is s:
            self.selected_series = None
        return True

    def select_series(self, name: str) -> bool:
        s = self.series.get(name)
        if s is None:
            return False
        self.selected_series = s
        return True

    # ---- models ----
    def model(self, name: str) -> AnyModel:
        try:
            return self.models[name]
        except KeyError as e:
            raise ModelNotFound(name) from e

    def get_model(self, name: str, default: AnyModel | None = None) -> AnyModel | None:
        return self.models.get(name, default)

    def model_names(self) -> list[str]:
        return list(self.models)

    def add_model(self, model: AnyModel, *, select: bool = True) -> None:
        # Recomputing under the same name replaces the previous entry.
        if not isinstance(model, Model):
            raise InvalidArgument("add_model() expects a Model implementation.")
        self.models[model.name] = model
        if select:
            self.selected_model = model

    def remove_model(self, name: str) -> bool:
        m = self.models.pop(name, None)
        if m is None:
            return False
        if self.selected_model is m:
            self.selected_model = None
        return True

    def select_model(self, name: str) -> bool:
        m = self.models.get(name)
        if m is None:
            return False
        self.selected_model = m
        return True

    # ---- operations ----
    def calculate(self, model: AnyModel) -> AnyModel:
        """(Re)compute `model`, then register and select it."""
        if model is None:
            raise InvalidArgument("Model cannot be None.")
        with self._operation(State.CALCULATING, None, "calculating model"):
            model.compute()
        self.add_model(model)
        return model

    def create_model(
        self,
        kind: ModelKind | str,
        parameter: int,
        *,
        series_name: str | None = None,
    ) -> AnyModel:
        """
        Build a model of `kind` over the named series (default: the selected
        one), register it and select it.
        """
        series = self[series_name] if series_name is not None else self.selected_series
        if series is None:
            raise InvalidState("No series selected.")
        with self._operation(State.CALCULATING, None, "calculating model"):
            model = build_model(kind, series, parameter)
        self.add_model(model)
        return model

    def load(self, loader: Callable[[], SeriesLike]) -> SeriesLike:
        """
        Run a caller-supplied loader and register the series it returns.

        An empty result counts as a failed load.
        """
        with self._operation(State.LOADING, State.LOADED, "loading data"):
            series = loader()
            if series is None or series.size() == 0:
                raise DegenerateInput("Loader returned no data.")
            self.add_series(series, overwrite=True)
        return series

    def save(self, writer: Callable[[SeriesLike], None], *, name: str | None = None) -> None:
        """Hand the named (default: selected) series to a caller-supplied writer."""
        series = self[name] if name is not None else self.selected_series
        if series is None:
            raise InvalidState("No data selected for saving.")
        with self._operation(State.SAVING, State.SAVED, "saving data"):
            writer(series)

    def reindex_selected(self, start_index: int) -> bool:
        if self.selected_series is None:
            raise InvalidState("No data selected.")
        changed = self.selected_series.reindex(start_index)
        if not changed:
            self._record_error("Failed to change indexing.")
        return changed

    def comparable_models(self, names: Iterable[str] | None = None) -> list[AnyModel]:
        """Models to compare side by side: the named ones, or all in registry order."""
        if names is None:
            return list(self.models.values())
        return [self.model(n) for n in names]
