"""SwipeTyper - swipe-to-type gesture interpretation over labeled tiles."""

__version__ = "0.1.0"

from swipe_typer.geometry import Point, Rect
from swipe_typer.tiles import Tile, TileBoundsRegistry
from swipe_typer.trail import PointerTrail
from swipe_typer.turns import TurnDetector, is_sharp_turn
from swipe_typer.dwell import DwellScheduler
from swipe_typer.locks import LockState
from swipe_typer.config import EngineConfig
from swipe_typer.engine import SwipeEngine, LetterEvent, SwipeEvent, SelectionTrigger, GesturePhase
from swipe_typer.plugins import SwipePlugin, PluginManager, PluginEvent
from swipe_typer.metrics import MetricsCollector
from swipe_typer.profiler import EngineProfiler
from swipe_typer.script import GestureScript, ScriptStep, SimulatedLoop, grid_bounds
