import logging

from application.dispatcher import Dispatcher
from application.identity import UserIdentityProvider
from application.remote_operations import RemoteOperationClient
from application.tokens import TokenAcquirer
from domain.repositories import BotUserRepository
from infrastructure.cache.token_cache import InMemoryTokenCache
from infrastructure.config import Settings
from infrastructure.db.bot_user_repository_postgres import PostgresBotUserRepository
from infrastructure.db.bot_user_repository_sqlite import SqliteBotUserRepository
from infrastructure.graphql.client import GraphQLApiClient
from infrastructure.logging_config import setup_logging
from interfaces.telegram.handlers import create_telegram_bot

logger = logging.getLogger(__name__)


def build_user_repository(settings: Settings) -> BotUserRepository:
    if settings.database_url:
        return PostgresBotUserRepository(settings.database_url)
    return SqliteBotUserRepository(settings.db_path)


def build_dispatcher(settings: Settings, gateway: GraphQLApiClient) -> Dispatcher:
    user_repo = build_user_repository(settings)
    identity = UserIdentityProvider(user_repo, email_domain=settings.email_domain)
    cache = InMemoryTokenCache(
        ttl_seconds=settings.token_cache_ttl_seconds,
        max_size=settings.token_cache_max_size,
    )
    tokens = TokenAcquirer(cache, identity, gateway)
    remote = RemoteOperationClient(gateway, tokens)
    return Dispatcher(user_repo, identity, tokens, remote)


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    with GraphQLApiClient(settings.api_url, timeout=settings.http_timeout_seconds) as gateway:
        dispatcher = build_dispatcher(settings, gateway)
        bot = create_telegram_bot(
            settings.telegram_bot_token, dispatcher, num_threads=settings.bot_workers
        )
        logger.info("Kalimeros bot started, backend at %s", settings.api_url)
        bot.infinity_polling()


if __name__ == "__main__":
    main()
