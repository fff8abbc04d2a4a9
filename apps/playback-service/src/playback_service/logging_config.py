"""
Focused logging configuration for debugging break scheduling.

Usage:
  LOG_FOCUS selects which parts of the engine log at LOG_LEVEL; every
  other logger is held at WARNING.

  LOG_FOCUS=1 (or "all")       every focus area
  LOG_FOCUS=break,clock        comma-separated focus areas

Focus areas:
  break      scheduler decisions and readiness counting
  companion  companion overlay show/expire
  clock      player clock mirror
  session    session lifecycle, fallbacks, session registry

Example:
  LOG_LEVEL=DEBUG LOG_FOCUS=break playback-service
"""

import logging
import os

FOCUS_AREAS: dict[str, list[str]] = {
    "break": [
        "playback_service.scheduler.break_scheduler",
        "playback_service.schedule.readiness",
    ],
    "companion": [
        "playback_service.companion.overlay",
    ],
    "clock": [
        "playback_service.clock.mirror",
    ],
    "session": [
        "playback_service.session.playback_session",
        "playback_service.orchestrator.session_manager",
    ],
}


def focused_modules(focus: str) -> list[str]:
    """Resolve a LOG_FOCUS value to logger names.

    Args:
        focus: "1"/"all", or comma-separated focus area names

    Returns:
        Logger names to raise to LOG_LEVEL (empty when focus is off)
    """
    focus = focus.strip().lower()
    if focus in ("", "0"):
        return []
    if focus in ("1", "all"):
        areas = list(FOCUS_AREAS)
    else:
        areas = [a.strip() for a in focus.split(",") if a.strip()]

    modules: list[str] = []
    for area in areas:
        if area not in FOCUS_AREAS:
            logging.getLogger(__name__).warning(f"Unknown LOG_FOCUS area: {area}")
            continue
        modules.extend(FOCUS_AREAS[area])
    return modules


def configure_focused_logging() -> None:
    """Configure root logging from LOG_LEVEL and LOG_FOCUS."""
    log_level = os.getenv("LOG_LEVEL", "INFO")
    modules = focused_modules(os.getenv("LOG_FOCUS", "0"))

    logging.basicConfig(
        level=logging.WARNING if modules else log_level,
        format="%(asctime)s.%(msecs)03d | %(name)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )

    for module in modules:
        logging.getLogger(module).setLevel(log_level)

    if modules:
        logging.getLogger().warning(
            f"Focused logging enabled: {', '.join(modules)} at {log_level}"
        )
