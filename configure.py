import asyncio
import discord
from mcsearch.config import DEFAULT_CONFIG_PATH, DEFAULT_PORT, ServerTarget, Settings, save_settings

async def check_token(token: str) -> bool:
    client = discord.Client(intents=discord.Intents.none())

    @client.event
    async def on_ready():
        print(f"✅ Logged in as {client.user}")
        await client.close()

    try:
        await client.start(token)
        return True
    except Exception as e:
        print(f"❌ Token check failed: {type(e).__name__}: {e}")
        return False

def prompt_target() -> ServerTarget:
    nickname = input("Server nickname: ")
    ip = input("Server address: ")
    port = input(f"Server port [{DEFAULT_PORT}]: ").strip() or DEFAULT_PORT
    group = input("Discord guild id to post the status in: ")
    return ServerTarget(nickname=nickname, ip=ip, port=port, group=group)

def main():
    print(f"Welcome to mc-search setup\nThis script will create {DEFAULT_CONFIG_PATH} for you\n\n")
    token = input("Please enter your Discord token: ")
    while not asyncio.run(check_token(token)):
        token = input("Please enter a valid Discord token: ")
    targets = [prompt_target()]
    while input("Add another server? [y/N]: ").strip().lower() == "y":
        targets.append(prompt_target())
    save_settings(Settings(discord_token=token, targets=targets), DEFAULT_CONFIG_PATH)
    print(f"✅ {DEFAULT_CONFIG_PATH} created successfully! Now run bot.py")

if __name__ == "__main__":
    main()
