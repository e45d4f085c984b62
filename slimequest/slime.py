"""The slime enemy: wanders its territory, chases and bites the player."""

from __future__ import annotations

import math
import random
from enum import Enum, IntEnum
from typing import Callable, Dict, Optional

from slimequest.character import Character, RayCaster
from slimequest.collision import intersect_sphere_vs_cylinder
from slimequest.debug_shapes import DebugRenderer
from slimequest.enemy import Enemy
from slimequest.model import Model
from slimequest.vector import Vec3

_ATTACK_NODE = "EyeBall"
_ATTACK_NODE_RADIUS = 0.2
_ATTACK_WINDOW = (0.1, 0.35)
_ATTACK_DAMAGE = 1
_ATTACK_INVINCIBLE_TIME = 0.5
_KNOCKBACK_UP = 5.0

_TERRITORY_COLOR = (0.0, 1.0, 0.0, 1.0)
_TARGET_COLOR = (1.0, 1.0, 0.0, 1.0)
_SEARCH_COLOR = (0.0, 0.0, 1.0, 1.0)
_ATTACK_COLOR = (1.0, 0.0, 0.0, 1.0)
_NODE_COLOR = (0.0, 0.0, 1.0, 1.0)


class SlimeState(Enum):
    WANDER = "wander"
    IDLE = "idle"
    PURSUIT = "pursuit"
    ATTACK = "attack"
    IDLE_BATTLE = "idle_battle"
    DAMAGE = "damage"
    DEATH = "death"


class SlimeAnimation(IntEnum):
    """Animation indices of the slime model."""

    IDLE_NORMAL = 0
    IDLE_BATTLE = 1
    ATTACK1 = 2
    ATTACK2 = 3
    WALK_FWD = 4
    WALK_BWD = 5
    WALK_LEFT = 6
    WALK_RIGHT = 7
    RUN_FWD = 8
    SENSE_SOMETHING_ST = 9
    SENSE_SOMETHING_PST = 10
    TAUNT = 11
    VICTORY = 12
    GET_HIT = 13
    DIZZY = 14
    DIE = 15


class EnemySlime(Enemy):
    """A slime driven by a small state machine."""

    def __init__(
        self,
        model: Model,
        player: Character,
        stage: Optional[RayCaster] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(stage)
        self.model = model
        self.player = player
        self.rng = rng if rng is not None else random.Random()
        self.debug_renderer: Optional[DebugRenderer] = None

        self.scale = Vec3(0.01, 0.01, 0.01)
        self.radius = 0.5
        self.height = 1.0

        self.state = SlimeState.WANDER
        self.target_position = Vec3()
        self.territory_origin = Vec3()
        self.territory_range = 10.0
        self.move_speed = 3.0
        self.turn_speed = math.radians(360.0)
        self.state_timer = 0.0
        self.search_range = 5.0
        self.attack_range = 1.5

        self._handlers: Dict[SlimeState, Callable[[float], None]] = {
            SlimeState.WANDER: self._update_wander,
            SlimeState.IDLE: self._update_idle,
            SlimeState.PURSUIT: self._update_pursuit,
            SlimeState.ATTACK: self._update_attack,
            SlimeState.IDLE_BATTLE: self._update_idle_battle,
            SlimeState.DAMAGE: self._update_damage,
            SlimeState.DEATH: self._update_death,
        }

        self._to_wander()

    def update(self, elapsed_time: float) -> None:
        self.update_invincible_timer(elapsed_time)
        self.update_velocity(elapsed_time)
        self.update_transform()
        self._handlers[self.state](elapsed_time)
        self.model.update_animation(elapsed_time)
        self.model.update_transform(self.transform)

    def draw_debug_primitive(self, renderer: DebugRenderer) -> None:
        """Queue collision, territory, target, search and attack shapes."""
        super().draw_debug_primitive(renderer)
        renderer.draw_cylinder(self.territory_origin, self.territory_range, 1.0, _TERRITORY_COLOR)
        renderer.draw_sphere(self.target_position, self.radius, _TARGET_COLOR)
        renderer.draw_cylinder(self.position, self.search_range, 1.0, _SEARCH_COLOR)
        renderer.draw_cylinder(self.position, self.attack_range, 1.0, _ATTACK_COLOR)

    def set_territory(self, origin: Vec3, range_: float) -> None:
        self.territory_origin = origin
        self.territory_range = range_

    def search_player(self) -> bool:
        """True when the player is within search range and in front of the slime."""
        diff = self.player.position - self.position
        if diff.length() >= self.search_range:
            return False
        dist_xz = math.sqrt(diff.x * diff.x + diff.z * diff.z)
        if dist_xz == 0.0:
            return False
        vx = diff.x / dist_xz
        vz = diff.z / dist_xz
        front_x = math.sin(self.angle.y)
        front_z = math.cos(self.angle.y)
        return front_x * vx + front_z * vz > 0.0

    def on_dead(self) -> None:
        self._to_death()

    def on_damaged(self) -> None:
        self._to_damage()

    def _random_range(self, low: float, high: float) -> float:
        return self.rng.uniform(low, high)

    def _distance_to_target(self) -> float:
        return (self.target_position - self.position).length()

    def _collide_node_with_player(self, node_name: str, node_radius: float) -> None:
        node = self.model.find_node(node_name)
        if node is None:
            return
        node_position = node.world_transform.origin
        if self.debug_renderer is not None:
            self.debug_renderer.draw_sphere(node_position, node_radius, _NODE_COLOR)

        player = self.player
        pushed = intersect_sphere_vs_cylinder(
            node_position, node_radius, player.position, player.radius, player.height
        )
        if pushed is None:
            return
        if not player.apply_damage(_ATTACK_DAMAGE, _ATTACK_INVINCIBLE_TIME):
            return
        vx = pushed.x - node_position.x
        vz = pushed.z - node_position.z
        length = math.sqrt(vx * vx + vz * vz)
        if length > 0.0:
            vx /= length
            vz /= length
        player.add_impulse(Vec3(vx, _KNOCKBACK_UP, vz))

    def _set_random_target(self) -> None:
        theta = self._random_range(-math.pi, math.pi)
        distance = self._random_range(0.0, self.territory_range)
        origin = self.territory_origin
        self.target_position = Vec3(
            origin.x + math.sin(theta) * distance,
            origin.y,
            origin.z + math.cos(theta) * distance,
        )

    def _move_to_target(self, elapsed_time: float, speed_rate: float) -> None:
        vx = self.target_position.x - self.position.x
        vz = self.target_position.z - self.position.z
        dist = math.sqrt(vx * vx + vz * vz)
        if dist > 0.0:
            vx /= dist
            vz /= dist
        else:
            vx = vz = 0.0
        self.move(vx, vz, self.move_speed * speed_rate)
        self.turn(elapsed_time, vx, vz, self.turn_speed * speed_rate)

    def _to_wander(self) -> None:
        self.state = SlimeState.WANDER
        self._set_random_target()
        self.model.play_animation(SlimeAnimation.WALK_FWD, True)

    def _update_wander(self, elapsed_time: float) -> None:
        vx = self.target_position.x - self.position.x
        vz = self.target_position.z - self.position.z
        if vx * vx + vz * vz < self.radius * self.radius:
            self._to_idle()
        self._move_to_target(elapsed_time, 0.5)
        if self.search_player():
            self._to_pursuit()

    def _to_idle(self) -> None:
        self.state = SlimeState.IDLE
        self.state_timer = self._random_range(3.0, 5.0)
        self.model.play_animation(SlimeAnimation.IDLE_NORMAL, True)

    def _update_idle(self, elapsed_time: float) -> None:
        self.state_timer -= elapsed_time
        if self.state_timer < 0.0:
            self._to_wander()
        if self.search_player():
            self._to_pursuit()

    def _to_pursuit(self) -> None:
        self.state = SlimeState.PURSUIT
        self.state_timer = self._random_range(3.0, 5.0)
        self.model.play_animation(SlimeAnimation.RUN_FWD, True)

    def _update_pursuit(self, elapsed_time: float) -> None:
        self.target_position = self.player.position
        self._move_to_target(elapsed_time, 1.0)
        self.state_timer -= elapsed_time
        if self.state_timer < 0.0:
            self._to_idle()
        if self._distance_to_target() < self.attack_range:
            self._to_attack()

    def _to_attack(self) -> None:
        self.state = SlimeState.ATTACK
        self.model.play_animation(SlimeAnimation.ATTACK1, False)

    def _update_attack(self, elapsed_time: float) -> None:
        low, high = _ATTACK_WINDOW
        if low <= self.model.current_animation_seconds <= high:
            self._collide_node_with_player(_ATTACK_NODE, _ATTACK_NODE_RADIUS)
        if not self.model.is_playing_animation():
            self._to_idle_battle()

    def _to_idle_battle(self) -> None:
        self.state = SlimeState.IDLE_BATTLE
        self.state_timer = self._random_range(2.0, 3.0)
        self.model.play_animation(SlimeAnimation.IDLE_BATTLE, True)

    def _update_idle_battle(self, elapsed_time: float) -> None:
        self.target_position = self.player.position
        self.state_timer -= elapsed_time
        if self.state_timer < 0.0:
            if self._distance_to_target() < self.attack_range:
                self._to_attack()
            else:
                self._to_wander()
        self._move_to_target(elapsed_time, 0.0)

    def _to_damage(self) -> None:
        self.state = SlimeState.DAMAGE
        self.model.play_animation(SlimeAnimation.GET_HIT, False)

    def _update_damage(self, elapsed_time: float) -> None:
        if not self.model.is_playing_animation():
            self._to_idle_battle()

    def _to_death(self) -> None:
        self.state = SlimeState.DEATH
        self.model.play_animation(SlimeAnimation.DIE, False)

    def _update_death(self, elapsed_time: float) -> None:
        if not self.model.is_playing_animation():
            self.destroy()