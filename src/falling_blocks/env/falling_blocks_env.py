from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import CATALOG, Command, FallingBlocksGame, GameConfig
from falling_blocks.visualization.palette import color_for_value


# Discrete action index -> engine command. RESET is left to env.reset().
ACTIONS: Tuple[Command, ...] = (
    Command.NONE,
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.ROTATE,
    Command.SOFT_DROP,
)


class FallingBlocksEnv(gym.Env):
    """One env step applies one player command, then one gravity tick."""

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 5000,
                 score_reward: float = 1.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = FallingBlocksGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.score_reward = float(score_reward)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.game.config.height, self.game.config.width
        max_tag = len(CATALOG)
        # Locked cells carry positive tags, the falling piece negative ones
        self.observation_space = spaces.Box(low=-max_tag, high=max_tag, shape=(h, w), dtype=np.int8)
        self.action_space = spaces.Discrete(len(ACTIONS))

        self._last_obs: Optional[np.ndarray] = None
        self._steps = 0

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        obs = self.game.get_state()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        command = ACTIONS[int(action)]
        score_before = self.game.score
        lines_before = self.game.lines_cleared_total

        self.game.on_command(command)
        self.game.on_tick()
        self._steps += 1

        lines = self.game.lines_cleared_total - lines_before
        gained = self.game.score - score_before
        reward_components: Dict[str, float] = {"score": self.score_reward * float(gained)}
        terminated = self.game.game_over
        truncated = not terminated and self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty
        reward = float(sum(reward_components.values()))

        obs = self.game.get_state()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["lines_cleared"] = lines
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._last_obs if self._last_obs is not None else self.game.get_state()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
            return img
        return None

    def close(self) -> None:
        pass
