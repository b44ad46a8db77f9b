"""
Host integration: run the reflow engine when a host document becomes ready.

The engine itself is stateless. Everything here models the glue a host
application needs around it: lifecycle events that carry a finished
document, a hook that lifts read-only protection around the reflow call,
and per-profile switches that register or remove that hook.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Mapping

from .models import Document
from .reflow import TransformFault, reflow
from .rules import PROFILES, RuleSet

logger = logging.getLogger(__name__)

Hook = Callable[[Document], None]
Notice = Callable[[str], None]

DEFAULT_EVENTS: Dict[str, str] = {
    "info": "info-page-loaded",
    "helpful": "helpful-panel-refreshed",
}


def _log_notice(message: str) -> None:
    logger.warning("%s", message)


class HostEvents:
    """Named lifecycle events with ordered hook lists."""

    def __init__(self) -> None:
        self._hooks: Dict[str, List[Hook]] = {}

    def register(self, event: str, hook: Hook) -> None:
        hooks = self._hooks.setdefault(event, [])
        if hook not in hooks:
            hooks.append(hook)

    def unregister(self, event: str, hook: Hook) -> None:
        hooks = self._hooks.get(event, [])
        if hook in hooks:
            hooks.remove(hook)

    def hooks_for(self, event: str) -> List[Hook]:
        return list(self._hooks.get(event, []))

    def fire(self, event: str, document: Document) -> None:
        """Run every hook registered on event against document."""
        for hook in self.hooks_for(event):
            hook(document)


class ReflowHook:
    """Callable hook that reflows a finished host document."""

    def __init__(self, ruleset: RuleSet, notice: Notice | None = None) -> None:
        self._ruleset = ruleset
        self._notice = notice or _log_notice

    @property
    def ruleset(self) -> RuleSet:
        return self._ruleset

    def __call__(self, document: Document) -> None:
        with document.writable():
            reflow(document, self._ruleset, on_fault=self._report)

    def _report(self, fault: TransformFault) -> None:
        self._notice(f"Reflow ({self._ruleset.name}) failed: {fault}")


class ProfileSwitch:
    """On/off state for one profile; enabling registers its hook on the host event."""

    def __init__(
        self,
        events: HostEvents,
        event: str,
        hook: ReflowHook,
    ) -> None:
        self._events = events
        self._event = event
        self._hook = hook
        self._enabled = False

    @property
    def name(self) -> str:
        return self._hook.ruleset.name

    @property
    def event(self) -> str:
        return self._event

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._events.register(self._event, self._hook)
        self._enabled = True
        logger.info("Enabled reflow profile '%s' on '%s'", self.name, self._event)

    def disable(self) -> None:
        self._events.unregister(self._event, self._hook)
        self._enabled = False
        logger.info("Disabled reflow profile '%s'", self.name)

    def toggle(self) -> bool:
        """Flip the switch and return the new state."""
        if self._enabled:
            self.disable()
        else:
            self.enable()
        return self._enabled


class ReflowIntegration:
    """Owns one ProfileSwitch per profile for a host's event registry."""

    def __init__(
        self,
        events: HostEvents | None = None,
        *,
        profiles: Mapping[str, RuleSet] | None = None,
        event_names: Mapping[str, str] | None = None,
        notice: Notice | None = None,
    ) -> None:
        self.events = events or HostEvents()
        rulesets = dict(profiles) if profiles is not None else {
            name: PROFILES[name] for name in DEFAULT_EVENTS
        }
        names = dict(DEFAULT_EVENTS)
        if event_names:
            names.update(event_names)
        self._switches: Dict[str, ProfileSwitch] = {}
        for name, ruleset in rulesets.items():
            if name not in names:
                raise ValueError(f"No host event configured for profile '{name}'.")
            self._switches[name] = ProfileSwitch(
                self.events, names[name], ReflowHook(ruleset, notice)
            )

    def switch(self, profile: str) -> ProfileSwitch:
        try:
            return self._switches[profile]
        except KeyError as exc:
            raise ValueError(f"Unknown profile '{profile}'.") from exc

    def enable(self, profile: str) -> None:
        self.switch(profile).enable()

    def disable(self, profile: str) -> None:
        self.switch(profile).disable()

    def toggle(self, profile: str) -> bool:
        return self.switch(profile).toggle()

    def active_profiles(self) -> List[str]:
        return [name for name, switch in self._switches.items() if switch.enabled]

    def enable_all(self, profiles: Iterable[str] | None = None) -> None:
        for name in profiles if profiles is not None else list(self._switches):
            self.enable(name)

    def status_indicator(self) -> str:
        """Short status text, e.g. "Reflow[info,helpful]", or "" when all are off."""
        active = self.active_profiles()
        if not active:
            return ""
        return f"Reflow[{','.join(active)}]"
