"""
Falah's Maze - top-down pygame client
Drives the game core through LevelManager; all rules live in the core.
"""

import logging

import pygame

from config import GAME_TITLE, GAME_VERSION
from game.characters import CHARACTERS, get_traits
from game.game_state import GameState, BossType
from game.level_manager import LevelManager
from utils.constants import CELL_PIXELS, FPS, PANEL_H, WALL, START, EXIT, KEY, WEAPON, AMMO
from utils.colors import (
    COLOR_BG, COLOR_MAZE_BG, COLOR_WALL, COLOR_PLAYER, COLOR_GOAL, COLOR_START,
    COLOR_KEY, COLOR_WEAPON, COLOR_AMMO, COLOR_FALAH, COLOR_SAIF, COLOR_STUNNED,
    COLOR_NPC, COLOR_NPC_DEAD, COLOR_TEXT, COLOR_TEXT_HIGHLIGHT, COLOR_DANGER, COLOR_PANEL_BG
)
from utils.helpers import format_time, pulse

WINDOW_MAX = 720

CELL_COLORS = {
    START: COLOR_START,
    EXIT: COLOR_GOAL,
    KEY: COLOR_KEY,
    WEAPON: COLOR_WEAPON,
    AMMO: COLOR_AMMO,
}


class MazeGame:
    """
    Main game class
    """
    def __init__(self):
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_MAX, WINDOW_MAX + PANEL_H))
        pygame.display.set_caption(f"{GAME_TITLE} v{GAME_VERSION}")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 16)
        self.big_font = pygame.font.SysFont("consolas", 40, bold=True)

        self.shout_text = ''
        self.shout_timer = 0.0
        self.manager = LevelManager(narrator=self._on_narration)
        self.running = True

    def _on_narration(self, text, boss):
        self.shout_text = text
        self.shout_timer = 2.0

    # ========== INPUT ==========

    def handle_events(self):
        phase = self.manager.session.state.phase
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key, phase)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if phase == GameState.STRUGGLE:
                    self.manager.increment_struggle()
                elif phase == GameState.PLAYING:
                    self.manager.fire_weapon()

    def _handle_key(self, key, phase):
        if key == pygame.K_ESCAPE:
            self.running = False
        elif phase == GameState.MENU and pygame.K_1 <= key <= pygame.K_9:
            index = key - pygame.K_1
            if index < len(CHARACTERS):
                self.manager.select_character(CHARACTERS[index])
        elif phase == GameState.PLAYING:
            if key == pygame.K_f:
                self.manager.toggle_flashlight()
            elif key == pygame.K_e:
                self.manager.fire_weapon()
        elif phase == GameState.STRUGGLE and key == pygame.K_SPACE:
            self.manager.increment_struggle()
        elif phase == GameState.WIN_LEVEL and key == pygame.K_RETURN:
            self.manager.proceed()
        elif phase == GameState.GAME_OVER and key == pygame.K_RETURN:
            self.manager.reinitialize()

    def read_movement(self):
        keys = pygame.key.get_pressed()
        dx = dz = 0.0
        if keys[pygame.K_UP] or keys[pygame.K_w]:
            dz -= 1
        if keys[pygame.K_DOWN] or keys[pygame.K_s]:
            dz += 1
        if keys[pygame.K_LEFT] or keys[pygame.K_a]:
            dx -= 1
        if keys[pygame.K_RIGHT] or keys[pygame.K_d]:
            dx += 1
        sprint = keys[pygame.K_LSHIFT]
        return (dx, dz), sprint

    # ========== DRAW ==========

    def render(self):
        self.screen.fill(COLOR_BG)
        phase = self.manager.session.state.phase

        if phase == GameState.MENU:
            self._draw_menu()
        else:
            level = self.manager.get_current_level()
            if level is not None:
                self._draw_level(level)
            self._draw_panel()
            self._draw_overlay(phase)

        pygame.display.flip()

    def _cell_pixels(self, level):
        return max(4, min(CELL_PIXELS, WINDOW_MAX // level.size))

    def _to_screen(self, x, z, cell_px):
        cell_size = self.manager.config.cell_size
        return (int((x / cell_size + 0.5) * cell_px), int((z / cell_size + 0.5) * cell_px))

    def _draw_level(self, level):
        cell_px = self._cell_pixels(level)
        state = self.manager.session.state
        pygame.draw.rect(self.screen, COLOR_MAZE_BG, (0, 0, level.size * cell_px, level.size * cell_px))

        for z in range(level.size):
            for x in range(level.size):
                code = int(level.grid[z, x])
                rect = (x * cell_px, z * cell_px, cell_px, cell_px)
                if code == WALL:
                    pygame.draw.rect(self.screen, COLOR_WALL, rect)
                elif code in CELL_COLORS:
                    if (x, z) in state.collected_coords or (code == WEAPON and state.has_weapon):
                        continue
                    pad = cell_px // 4
                    inner = (rect[0] + pad, rect[1] + pad, cell_px - pad * 2, cell_px - pad * 2)
                    pygame.draw.rect(self.screen, CELL_COLORS[code], inner, border_radius=3)

        radius = max(2, cell_px // 3)
        for npc in level.npc_manager.npcs:
            color = COLOR_NPC if npc.alive else COLOR_NPC_DEAD
            pygame.draw.circle(self.screen, color, self._to_screen(npc.x, npc.z, cell_px), radius - 1)

        player = self.manager.player
        if player is not None:
            pygame.draw.circle(self.screen, COLOR_PLAYER, self._to_screen(player.x, player.z, cell_px), radius)

        pursuer = level.pursuer
        if self.manager.session.is_pursuer_stunned():
            color = COLOR_STUNNED
        elif state.active_boss == BossType.SAIF:
            color = COLOR_SAIF
        else:
            color = COLOR_FALAH
        pygame.draw.circle(self.screen, color, self._to_screen(pursuer.x, pursuer.z, cell_px), radius + 1)

    def _draw_panel(self):
        snap = self.manager.snapshot()
        panel_y = WINDOW_MAX
        pygame.draw.rect(self.screen, COLOR_PANEL_BG, (0, panel_y, WINDOW_MAX, PANEL_H))

        light = "ON" if snap['flashlight_on'] else "OFF"
        lines = [
            f"Level {snap['level']}  HP {snap['health']}  Battery {snap['battery']:.0f} ({light})  "
            f"Keys {snap['keys_collected']}/{snap['keys_needed']}  Ammo {snap['ammo']}",
            f"Boss {snap['active_boss'].name}  Rage x{snap['rage_multiplier']:.2f}  "
            f"Time {format_time(snap['time_survived'])}  Escapes {snap['escapes']}",
        ]
        lines.extend(snap['logs'][:3])
        for i, line in enumerate(lines):
            color = COLOR_TEXT_HIGHLIGHT if i < 2 else COLOR_TEXT
            self.screen.blit(self.font.render(line, True, color), (10, panel_y + 6 + i * 20))

        if self.shout_timer > 0:
            text = self.font.render(self.shout_text, True, COLOR_DANGER)
            self.screen.blit(text, (WINDOW_MAX - text.get_width() - 10, panel_y + 6))

    def _draw_overlay(self, phase):
        state = self.manager.session.state
        if phase == GameState.STRUGGLE:
            title = f"STRUGGLE! {state.struggle_progress}%  (SPACE / CLICK)"
        elif phase == GameState.JUMPSCARE:
            title = "!!!"
        elif phase == GameState.GAME_OVER:
            title = f"GAME OVER - level {state.level} (ENTER)"
        elif phase == GameState.WIN_LEVEL:
            title = f"LEVEL CLEARED - on to level {state.level} (ENTER)"
        else:
            return
        alpha = int(120 + 100 * pulse(pygame.time.get_ticks() / 1000.0))
        text = self.big_font.render(title, True, COLOR_DANGER)
        text.set_alpha(alpha)
        self.screen.blit(text, (WINDOW_MAX // 2 - text.get_width() // 2, WINDOW_MAX // 2))

    def _draw_menu(self):
        title = self.big_font.render(GAME_TITLE, True, COLOR_TEXT_HIGHLIGHT)
        self.screen.blit(title, (WINDOW_MAX // 2 - title.get_width() // 2, 60))
        for i, name in enumerate(CHARACTERS):
            traits = get_traits(name)
            line = f"{i + 1}. {name} - {traits.description}"
            self.screen.blit(self.font.render(line, True, COLOR_TEXT), (40, 160 + i * 28))

    # ========== LOOP ==========

    def run(self):
        while self.running:
            dt = self.clock.tick(FPS) / 1000.0
            self.handle_events()
            move, sprint = self.read_movement()
            self.manager.update(dt, move, sprint)
            self.shout_timer = max(0.0, self.shout_timer - dt)
            self.render()

        pygame.quit()
        print("Game closed.")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    MazeGame().run()


if __name__ == "__main__":
    main()
