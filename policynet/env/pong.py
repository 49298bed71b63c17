"""
Single-paddle Pong simulator used to exercise a trained policy.

Coordinates are normalised to [0, 1]; the paddle sits on the right wall and
moves vertically, the left wall reflects the ball.
"""

from dataclasses import dataclass

from ..utils.backend import make_rng

PADDLE_HEIGHT = 0.2
PADDLE_WIDTH = 0.02
BALL_RADIUS = 0.02
PADDLE_SPEED = 0.04
PADDLE_MIN, PADDLE_MAX = 0.1, 0.9


@dataclass(frozen=True)
class State:
    ball_x: float
    ball_y: float
    paddle_y: float

    def as_row(self):
        return [self.ball_x, self.ball_y, self.paddle_y]


class PongEnv:
    def __init__(self, seed=None):
        self.rng = make_rng(seed)
        self.ball_x = self.ball_y = 0.5
        self.ball_vx = self.ball_vy = 0.0
        self.paddle_y = 0.5
        self.done = True

    def _velocity_jitter(self):
        return float(self.rng.uniform(-0.05, 0.05))

    def reset(self) -> State:
        # ball at centre, mostly moving towards the paddle
        self.ball_x = 0.5
        self.ball_y = 0.5
        self.ball_vx = 0.03 + self._velocity_jitter()
        self.ball_vy = self._velocity_jitter()

        self.paddle_y = 0.5
        self.done = False
        return self.state()

    def state(self) -> State:
        return State(self.ball_x, self.ball_y, self.paddle_y)

    def step(self, action):
        """Returns ``(state, reward, done)``; stepping a finished episode is a no-op."""
        if self.done:
            return self.state(), 0.0, True

        self.paddle_y += int(action) * PADDLE_SPEED
        self.paddle_y = min(PADDLE_MAX, max(PADDLE_MIN, self.paddle_y))

        self.ball_x += self.ball_vx
        self.ball_y += self.ball_vy
        reward = 0.0

        # Top/bottom walls
        if self.ball_y <= BALL_RADIUS or self.ball_y >= 1.0 - BALL_RADIUS:
            self.ball_vy = -self.ball_vy
            self.ball_y = min(1.0 - BALL_RADIUS, max(BALL_RADIUS, self.ball_y))

        # Right wall (paddle)
        if self.ball_x >= 1.0 - PADDLE_WIDTH - BALL_RADIUS:
            paddle_top = self.paddle_y - PADDLE_HEIGHT / 2
            paddle_bottom = self.paddle_y + PADDLE_HEIGHT / 2

            if paddle_top <= self.ball_y <= paddle_bottom:
                self.ball_vx = -self.ball_vx * 1.05
                self.ball_vy += (self.ball_y - self.paddle_y) * 0.5
                self.ball_x = 1.0 - PADDLE_WIDTH - BALL_RADIUS - 0.001
                reward = 1.0
            elif self.ball_x >= 1.0:
                reward = -1.0
                self.done = True

        # Left wall
        if self.ball_x <= BALL_RADIUS:
            self.ball_vx = -self.ball_vx
            self.ball_x = BALL_RADIUS + 0.001

        return self.state(), reward, self.done


def run_episode(agent, env: PongEnv, max_steps=1000) -> float:
    """Plays one episode with ``agent.act`` and returns the total reward."""
    state = env.reset()
    total = 0.0
    for _ in range(max_steps):
        state, reward, done = env.step(agent.act(state))
        total += reward
        if done:
            break
    return total
