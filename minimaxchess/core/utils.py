import logging


def step(value: int) -> int:
    """Clamp a delta to -1, 0 or 1."""
    if value >= 1:
        return 1
    if value <= -1:
        return -1
    return 0


def log_search_info(logger: logging.Logger, side, move_str, value, nodes, elapsed, depth):
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    logger.info(
        "search side %s depth %d move %s value %s nodes %d nps %d time %dms",
        side.value, depth, move_str, value, nodes, nps, int(elapsed * 1000),
    )
