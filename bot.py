import logging
from discord.ext import commands
from discord import Activity, ActivityType, Intents
import bot_commands
from mcsearch.config import load_settings
from mcsearch.updater import StatusUpdater

log = logging.getLogger("mcsearch.bot")

settings = load_settings()

INTENTS = Intents.default()


class StatusBot(commands.Bot):
    def __init__(self, updater: StatusUpdater, **kwargs):
        super().__init__(**kwargs)
        self.updater = updater

    async def close(self):
        await self.updater.stop()
        await super().close()


updater = StatusUpdater(
    settings.targets,
    interval=settings.interval,
    timeout=settings.ping_timeout,
    workers=settings.ping_workers,
    protocol_version=settings.protocol_version,
)

bot = StatusBot(updater, command_prefix=settings.command_prefix, intents=INTENTS)
tree = bot.tree

bot_commands.setup(tree, updater, settings)


@bot.event
async def on_ready():
    # on_ready fires again after reconnects
    if not updater.running:
        updater.start()
        await tree.sync()
    log.info("Logged in as %s (id=%s), watching %d servers", bot.user, bot.user.id, len(settings.targets))
    await bot.change_presence(activity=Activity(
        type=ActivityType.watching,
        name=bot_commands.MSG["common.activity"].format(count=len(settings.targets))))

if __name__ == "__main__":
    if not settings.discord_token:
        raise SystemExit("No Discord token configured; run configure.py or set DISCORD_TOKEN")
    bot.run(settings.discord_token, root_logger=True)
