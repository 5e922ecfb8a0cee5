"""Trigger engine: the active rule set and dispatch of matched actions."""

import logging
from collections.abc import Mapping
from concurrent.futures import Executor, Future
from threading import Lock
from typing import Any, Optional

from midirelay.activity import ActivityLog
from midirelay.exceptions import DispatchError, MidiValidationError
from midirelay.models import ActionType, LogDirection, MidiEvent, Trigger, new_trigger_id
from midirelay.services import ConfigService
from midirelay.validation import validate_trigger

from .matching import matches

logger = logging.getLogger(__name__)


class TriggerEngine:
    """
    Holds the armed trigger set and runs the actions of matching triggers.

    The persisted list (`triggers` in the config store) is the source of
    truth. Every change is written there first, then the in-memory set is
    replaced as a whole, so dispatch always sees a consistent snapshot.

    Every matching trigger fires; actions run on the executor and are never
    awaited by dispatch(). A failing action is recorded as APP-ERR and does
    not affect the other triggers.
    """

    def __init__(
        self,
        config: ConfigService,
        activity_log: ActivityLog,
        executor: Executor,
        http_action: Any,
        midi_action: Any,
    ):
        """
        Initialize the trigger engine.

        Args:
            config: Settings store holding `triggers`
            activity_log: Where action failures are recorded
            executor: Runs trigger actions concurrently
            http_action: Runs webhook actions (HttpAction)
            midi_action: Runs MIDI actions (MidiAction)
        """
        self._config = config
        self._log = activity_log
        self._executor = executor
        self._http = http_action
        self._midi = midi_action
        self._lock = Lock()
        self._active: tuple[Trigger, ...] = ()

    # =================================================================
    # Rule set
    # =================================================================

    def load(self) -> list[Trigger]:
        """Replace the active set with the persisted trigger list."""
        # Read and swap under one lock; a reload never installs an older list
        with self._lock:
            triggers: list[Trigger] = self._config.get("triggers", [])
            self._active = tuple(triggers)

        inert = [t.id for t in triggers if not t.is_armed]
        if inert:
            logger.warning(f"Inert triggers (unknown midicommand or actiontype): {inert}")
        logger.debug(f"Loaded {len(triggers)} trigger(s)")
        return list(triggers)

    @property
    def active(self) -> list[Trigger]:
        with self._lock:
            return list(self._active)

    def get(self, trigger_id: str) -> Optional[Trigger]:
        for trigger in self._config.get("triggers", []):
            if trigger.id == trigger_id:
                return trigger
        return None

    @staticmethod
    def _coerce(trigger: Trigger | Mapping[str, Any]) -> Trigger:
        result = validate_trigger(trigger)
        if not result.valid:
            raise MidiValidationError(result.errors, subject="trigger")
        return trigger if isinstance(trigger, Trigger) else Trigger.model_validate(dict(trigger))

    def add(self, trigger: Trigger | Mapping[str, Any]) -> Trigger:
        """
        Validate, assign a new id and persist a trigger.

        Raises:
            MidiValidationError: If the trigger definition is invalid
        """
        created = self._coerce(trigger).model_copy(update={"id": new_trigger_id()})
        self._config.modify("triggers", lambda triggers: [*triggers, created])
        self.load()
        logger.info(f"Trigger added: {created.id}")
        return created

    def update(self, trigger: Trigger | Mapping[str, Any]) -> bool:
        """
        Replace the trigger with the same id.

        Returns:
            False if no trigger has that id

        Raises:
            MidiValidationError: If the trigger definition is invalid
        """
        updated = self._coerce(trigger)

        def replace(triggers: list[Trigger]) -> Optional[list[Trigger]]:
            for index, existing in enumerate(triggers):
                if updated.id and existing.id == updated.id:
                    triggers[index] = updated
                    return triggers
            return None

        if self._config.modify("triggers", replace) is None:
            return False
        self.load()
        logger.info(f"Trigger updated: {updated.id}")
        return True

    def delete(self, trigger_id: str) -> bool:
        """
        Remove a trigger by id.

        Returns:
            False if no trigger has that id
        """
        def remove(triggers: list[Trigger]) -> Optional[list[Trigger]]:
            remaining = [t for t in triggers if t.id != trigger_id]
            return remaining if len(remaining) != len(triggers) else None

        if self._config.modify("triggers", remove) is None:
            return False
        self.load()
        logger.info(f"Trigger deleted: {trigger_id}")
        return True

    def replace_all(self, triggers: list[Trigger]) -> None:
        """Persist a whole trigger list (e.g. from a profile) and reload."""
        self._config.set("triggers", triggers)
        self.load()

    # =================================================================
    # Dispatch
    # =================================================================

    def dispatch(self, event: MidiEvent) -> list[Future]:
        """
        Submit the action of every armed trigger matching the event.

        Returns:
            One future per submitted action, in trigger order
        """
        with self._lock:
            active = self._active

        futures: list[Future] = []
        for trigger in active:
            if not matches(trigger, event):
                continue
            try:
                futures.append(self._executor.submit(self.execute, trigger, event))
            except RuntimeError as e:
                # Executor already shut down
                logger.warning(f"Could not run trigger {trigger.id}: {e}")
        return futures

    def execute(self, trigger: Trigger, event: Optional[MidiEvent] = None) -> None:
        """
        Run a trigger's action. Never raises.

        Failures are logged as APP-ERR. A trigger with an unknown action
        type only produces a warning.
        """
        logger.info(f"Executing trigger: {trigger.id}")
        try:
            match trigger.action:
                case ActionType.HTTP:
                    self._http.run(trigger)
                case ActionType.MIDI:
                    self._midi.run(trigger, event)
                case None:
                    logger.warning(f"Unknown trigger action type: {trigger.actiontype!r} ({trigger.id})")
        except DispatchError as e:
            logger.warning(f"Trigger {trigger.id} failed: {e.technical_message}")
            self._log.append(LogDirection.APP_ERR, e.port, e.command, e.data)
        except Exception as e:
            logger.exception(f"Unexpected error executing trigger {trigger.id}")
            self._log.append(LogDirection.APP_ERR, "Trigger", trigger.id, {"error": str(e)})

    # Defined last: the name shadows the builtin inside the class body
    def list(self) -> list[Trigger]:
        """Reload from the store and return every trigger."""
        return self.load()
