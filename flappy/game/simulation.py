# flappy/game/simulation.py
from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from .bird import Bird
from .collision import collision_cause
from .config import WorldConfig
from .pipes import PipeGen

logger = logging.getLogger(__name__)


class GameState(enum.Enum):
    IDLE = "idle"               # start screen, waiting for start/flap
    RUNNING = "running"
    TERMINATED = "terminated"   # end screen, waiting for restart


class Event(enum.Enum):
    START = "start"
    FLAP = "flap"
    RESTART = "restart"
    COLLIDE = "collide"


class GameFlow(StateMachine):
    """
    Transition guard only; Simulation applies the side effects.
    Events not listed for the current state raise TransitionNotAllowed.
    FLAP while idle doubles as the start trigger (first tap starts the run).
    """
    idle = State(GameState.IDLE.value, value=GameState.IDLE.value, initial=True)
    running = State(GameState.RUNNING.value, value=GameState.RUNNING.value)
    terminated = State(GameState.TERMINATED.value, value=GameState.TERMINATED.value)

    start = idle.to(running)
    flap = idle.to(running) | running.to.itself()
    restart = terminated.to(running)
    collide = running.to(terminated)


class GameHooks:
    """
    Fire-and-forget notifications for audio/UI collaborators.
    Subclass and override what you need; every hook defaults to a no-op.
    """
    def on_start(self) -> None:
        pass

    def on_flap(self) -> None:
        pass

    def on_score(self, score: int) -> None:
        pass

    def on_terminate(self, score: int) -> None:
        pass


@dataclass(frozen=True)
class BirdView:
    x: float
    y: float
    vy: float
    w: float
    h: float


@dataclass(frozen=True)
class PipeView:
    x: float
    top: int
    passed: bool


@dataclass(frozen=True)
class WorldView:
    """Read-only snapshot handed to renderers and observers."""
    state: GameState
    score: int
    bird: BirdView
    pipes: Tuple[PipeView, ...]
    spawn_timer_ms: float
    seed: int
    config: WorldConfig


class Simulation:
    """
    Owns the bird, the pipes and the score.
    Everything mutates inside `dispatch` (transitions) and `update` (ticks).
    """
    def __init__(self,
                 config: Optional[WorldConfig] = None,
                 seed: int | None = None,
                 hooks: Optional[GameHooks] = None):
        self.config = config if config is not None else WorldConfig()
        self.hooks = hooks if hooks is not None else GameHooks()
        self.pipe_gen = PipeGen(self.config, seed)
        self.bird = self._new_bird()
        self.score = 0
        self.flow = GameFlow()
        self.death_cause: Optional[str] = None

    @property
    def state(self) -> GameState:
        return GameState(self.flow.current_state.value)

    @property
    def seed(self) -> int:
        return self.pipe_gen.seed

    @property
    def pipes(self):
        return self.pipe_gen.pipes

    def _new_bird(self) -> Bird:
        c = self.config
        return Bird(x=float(c.bird_x), y=float(c.bird_start_y), vy=0.0, w=c.bird_w, h=c.bird_h)

    # -------------------- Transitions --------------------

    def dispatch(self, event: Event) -> bool:
        """Apply one event through GameFlow. Returns False if it was ignored."""
        prev = self.state
        try:
            self.flow.send(event.value)
        except TransitionNotAllowed:
            logger.debug("ignored %s while %s", event.value, prev.value)
            return False

        nxt = self.state
        if nxt is GameState.RUNNING and prev is not GameState.RUNNING:
            self._begin_run()
        elif event is Event.FLAP:
            self.bird.flap(self.config.flap_velocity)
            self._notify("on_flap")
        elif nxt is GameState.TERMINATED:
            logger.info("run over: score=%d cause=%s seed=%d", self.score, self.death_cause, self.seed)
            self._notify("on_terminate", self.score)
        return True

    def start(self) -> bool:
        return self.dispatch(Event.START)

    def flap(self) -> bool:
        return self.dispatch(Event.FLAP)

    def restart(self) -> bool:
        return self.dispatch(Event.RESTART)

    def _begin_run(self):
        self.score = 0
        self.bird = self._new_bird()
        self.pipe_gen.reset()
        self.death_cause = None
        logger.info("run started (seed=%d)", self.seed)
        self._notify("on_start")

    def _notify(self, name: str, *args) -> None:
        # Collaborator failures must never break the tick.
        try:
            getattr(self.hooks, name)(*args)
        except Exception:
            logger.exception("hook %s failed", name)

    # -------------------- Tick --------------------

    def update(self, dt_ms: float) -> None:
        """
        One tick. Order matters:
        physics -> spawn -> scroll/score/evict -> collision.
        Does nothing unless RUNNING.
        """
        if self.state is not GameState.RUNNING:
            return

        self.bird.update_physics(self.config.gravity)
        self.pipe_gen.try_spawn(dt_ms)

        for _ in range(self.pipe_gen.advance(self.bird.x)):
            self.score += 1
            self._notify("on_score", self.score)

        cause = collision_cause(self.bird, self.pipe_gen.pipes, self.config)
        if cause is not None:
            self.death_cause = cause
            self.dispatch(Event.COLLIDE)

    # -------------------- Views --------------------

    def view(self) -> WorldView:
        b = self.bird
        return WorldView(
            state=self.state,
            score=self.score,
            bird=BirdView(x=b.x, y=b.y, vy=b.vy, w=b.w, h=b.h),
            pipes=tuple(PipeView(x=p.x, top=p.top, passed=p.passed) for p in self.pipe_gen.pipes),
            spawn_timer_ms=self.pipe_gen.timer_ms,
            seed=self.seed,
            config=self.config,
        )
