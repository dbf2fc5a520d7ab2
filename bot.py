# bot.py
import os
import discord
from discord.ext import commands
from dotenv import load_dotenv

load_dotenv()
TOKEN    = os.getenv("DISCORD_TOKEN")
GUILD_ID = int(os.getenv("GUILD_ID", "0") or 0)

# message_content not needed for slash cmds
intents = discord.Intents.default()
bot = commands.Bot(command_prefix="!", intents=intents)
tree = bot.tree

COGS = ["cogs.wheel"]


@bot.event
async def setup_hook():
    # Load cogs BEFORE syncing
    for ext in COGS:
        try:
            await bot.load_extension(ext)
            print(f"[cogs] loaded {ext}")
        except Exception as e:
            print(f"[cogs] FAILED {ext}: {e}")


@bot.event
async def on_ready():
    # Final sync to the dev guild for instant availability
    if GUILD_ID:
        cmds = await tree.sync(guild=discord.Object(id=GUILD_ID))
        print("[sync] guild commands:", [c.name for c in cmds], "count:", len(cmds))
    else:
        await tree.sync()
        print("Slash commands globally synced (may take a while)")

    print(f"Logged in as {bot.user} (ID: {bot.user.id})")


def main():
    if not TOKEN:
        raise SystemExit("DISCORD_TOKEN missing in .env")
    bot.run(TOKEN)


if __name__ == "__main__":
    main()
