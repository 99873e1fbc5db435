import logging

from mini_pos_cafe.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """
    Настраивает корневой логгер один раз за процесс.
    Уровень берётся из settings.LOG_LEVEL, если не передан явно.
    """
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
