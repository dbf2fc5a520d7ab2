# cogs/wheel.py
import io
import logging
import os
from typing import Dict, Optional

import discord
from discord import app_commands
from discord.ext import commands

from prizewheel.engine import WheelEngine, configure_from_env
from prizewheel.errors import WheelError
from prizewheel.messages import already_spinning, result_blurb, result_headline, rule_title, state_line
from prizewheel.render import (
    MAX_UPLOAD_BYTES,
    SPIN_SECONDS,
    WHEEL_SIZE,
    layout_key,
    render_spin_gif_async,
    render_static_wheel,
)
from prizewheel.state import SpinOutcome

logger = logging.getLogger(__name__)

# ---------------- Guild scope ----------------
GUILD_ID = int(os.getenv("GUILD_ID", "0") or 0)
GUILD = discord.Object(id=GUILD_ID) if GUILD_ID else None


def _result_embed(engine: WheelEngine, outcome: SpinOutcome) -> discord.Embed:
    rule, _ = engine.policy.rule_for(outcome.spin_number)
    embed = discord.Embed(
        title=f"🎡 {result_headline(outcome.prize_label, engine.rules.fallback_label)}",
        description=f"**{outcome.prize_label}**\n{result_blurb(outcome.prize_label)}",
        color=0x2b6cb0,
    )
    embed.set_footer(text=f"Spin #{outcome.spin_number} · {rule_title(rule)}")
    embed.set_image(url="attachment://result.png")
    return embed


class WheelView(discord.ui.View):
    def __init__(self, engine: WheelEngine, size: int = WHEEL_SIZE):
        super().__init__(timeout=180.0)
        self.engine = engine
        self.size = size
        self.labels = layout_key(engine.segments)

    def _static_png(self, rotation: float) -> io.BytesIO:
        return render_static_wheel(self.labels, rotation, self.engine.pointer_angle, size=self.size)

    async def _spin_gif(self, outcome: SpinOutcome) -> Optional[io.BytesIO]:
        """GIF of the spin, shrunk once if too large; None means show a static result."""
        for size in (self.size, max(256, self.size // 2)):
            try:
                buf = await render_spin_gif_async(
                    self.labels,
                    outcome.start_rotation,
                    outcome.target_rotation,
                    self.engine.pointer_angle,
                    size=size,
                    duration_sec=SPIN_SECONDS,
                )
            except Exception:
                logger.warning("spin rendering failed for spin %s", outcome.spin_number, exc_info=True)
                return None
            if buf.getbuffer().nbytes <= MAX_UPLOAD_BYTES:
                return buf
        return None

    @discord.ui.button(label="Spin", style=discord.ButtonStyle.primary, emoji="🎡")
    async def spin_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        try:
            outcome = self.engine.start_spin()
        except WheelError as e:
            logger.exception("wheel spin failed")
            await interaction.response.send_message(f"❌ The wheel is misconfigured: {e}", ephemeral=True)
            return
        if outcome is None:
            await interaction.response.send_message(already_spinning(), ephemeral=True)
            return

        button.disabled = True
        await interaction.response.edit_message(view=self)

        gif_buf = await self._spin_gif(outcome)
        if gif_buf is not None:
            spinning = discord.Embed(title="🎡 Spinning…", description="Good luck!")
            spinning.set_image(url="attachment://spin.gif")
            await interaction.edit_original_response(
                embed=spinning,
                attachments=[discord.File(gif_buf, filename="spin.gif")],
                view=self,
            )

        revealed = await self.engine.wait_for_reveal()
        button.disabled = False
        if revealed is None:
            # reset while the wheel was turning
            idle = discord.Embed(title="🎡 Prize Wheel", description="The wheel was reset. Press **Spin** to play.")
            idle.set_image(url="attachment://wheel.png")
            await interaction.edit_original_response(
                embed=idle,
                attachments=[discord.File(self._static_png(0.0), filename="wheel.png")],
                view=self,
            )
            return

        await interaction.edit_original_response(
            embed=_result_embed(self.engine, revealed),
            attachments=[discord.File(self._static_png(revealed.target_rotation), filename="result.png")],
            view=self,
        )
        self.engine.acknowledge()


# ---------------- Cog ----------------
class PrizeWheel(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.engines: Dict[int, WheelEngine] = {}

    def engine_for(self, guild_id: Optional[int]) -> WheelEngine:
        key = int(guild_id or 0)
        engine = self.engines.get(key)
        if engine is None:
            engine = configure_from_env()
            self.engines[key] = engine
        return engine

    @app_commands.command(name="wheel", description="Spin the prize wheel.")
    @app_commands.guilds(*([GUILD] if GUILD else []))
    async def wheel(self, interaction: discord.Interaction):
        try:
            engine = self.engine_for(interaction.guild_id)
        except WheelError as e:
            logger.exception("wheel configuration rejected")
            await interaction.response.send_message(f"❌ The wheel is misconfigured: {e}", ephemeral=True)
            return

        snap = engine.get_state()
        png = render_static_wheel(layout_key(engine.segments), snap.cumulative_rotation, engine.pointer_angle)
        embed = discord.Embed(
            title="🎡 Prize Wheel",
            description="Press **Spin** to choose your prize.\n" + state_line(
                snap.spin_number, snap.cumulative_rotation, snap.in_progress
            ),
            color=0x2b6cb0,
        )
        embed.set_image(url="attachment://wheel.png")
        await interaction.response.send_message(
            embed=embed,
            file=discord.File(png, filename="wheel.png"),
            view=WheelView(engine),
        )

    @app_commands.command(name="wheel_status", description="Show the wheel's spin counter and rotation.")
    @app_commands.guilds(*([GUILD] if GUILD else []))
    async def wheel_status(self, interaction: discord.Interaction):
        snap = self.engine_for(interaction.guild_id).get_state()
        await interaction.response.send_message(
            state_line(snap.spin_number, snap.cumulative_rotation, snap.in_progress),
            ephemeral=True,
        )

    @app_commands.command(name="wheel_reset", description="(Admin) Reset the wheel's spin counter")
    @app_commands.guilds(*([GUILD] if GUILD else []))
    @app_commands.default_permissions(administrator=True)
    @app_commands.checks.has_permissions(administrator=True)
    async def wheel_reset(self, interaction: discord.Interaction):
        self.engine_for(interaction.guild_id).reset()
        await interaction.response.send_message("✅ Wheel reset - spin count back to 0.", ephemeral=True)


async def setup(bot: commands.Bot):
    await bot.add_cog(PrizeWheel(bot))
