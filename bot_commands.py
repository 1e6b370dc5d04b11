from typing import Optional
import json, os
import discord
from discord import app_commands, Embed, Colour
from mcsearch.config import DEFAULT_PORT, Settings
from mcsearch.errors import PingError
from mcsearch.raw_ping import probe
from mcsearch.updater import StatusUpdater

MESSAGES_PATH = os.getenv("MESSAGES_JSON_PATH",
                          os.path.join(os.path.dirname(os.path.abspath(__file__)), "messages.json"))
with open(MESSAGES_PATH, "r", encoding="utf-8") as f:
    MSG = json.load(f)

EMBED_DESCRIPTION_LIMIT = 4096

def clip(text: str, limit: int = EMBED_DESCRIPTION_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 1] + "…"

def cached_status(updater: StatusUpdater, guild_id: Optional[int]) -> str:
    if guild_id is None:
        return MSG["common.server_only"]
    return updater.get(str(guild_id)) or MSG["mc.none"]

def setup(tree, updater: StatusUpdater, settings: Settings):
    @tree.command(name="mc", description=MSG["mc.description"])
    async def mc_cmd(inter: discord.Interaction):
        embed = Embed(title=MSG["mc.embed.title"],
                      description=clip(cached_status(updater, inter.guild_id)),
                      colour=Colour.blurple())
        await inter.response.send_message(embed=embed)

    @tree.command(name="ping", description=MSG["ping.description"])
    @app_commands.describe(ip=MSG["ping.describe.ip"], port=MSG["ping.describe.port"])
    async def ping_cmd(inter: discord.Interaction, ip: str,
                       port: app_commands.Range[int, 1, 65535] = DEFAULT_PORT):
        await inter.response.defer()
        try:
            text = await probe(ip, port, settings.protocol_version, settings.ping_timeout)
        except PingError as e:
            embed = Embed(title=f"❌ {ip}:{port}",
                          description=clip(MSG["ping.embed.err.desc"].format(error=f"{type(e).__name__}: {e}")),
                          colour=Colour.red())
        else:
            embed = Embed(title=f"✅ {ip}:{port}", description=clip(text), colour=Colour.green())
        await inter.followup.send(embed=embed)

    @tree.command(name="status", description=MSG["status.description"])
    async def status_cmd(inter: discord.Interaction):
        embed = Embed(title=MSG["status.embed.title"], colour=Colour.green() if updater.running else Colour.red())
        embed.add_field(name=MSG["status.embed.field_targets"], value=str(len(updater.targets)), inline=True)
        embed.add_field(name=MSG["status.embed.field_groups"], value=str(len(updater.messages)), inline=True)
        embed.add_field(name=MSG["status.embed.field_interval"], value=f"{updater.interval:g}s", inline=True)
        last = updater.last_update.isoformat() if updater.last_update else MSG["status.never"]
        embed.set_footer(text=MSG["status.embed.footer"].format(last_update=last))
        await inter.response.send_message(embed=embed)
