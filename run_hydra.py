from datetime import datetime, timezone
import time

import hydra
from loguru import logger
from omegaconf import DictConfig, OmegaConf

from digevo.config import build_resources, load_simulation_config
from digevo.organisms import Replicator
from digevo.simulation import Simulation
from digevo.utils.logger_setup import setup_logger


def run_simulation(cfg: DictConfig) -> Simulation:
    start_time = time.time()

    logger.info("Starting digevo simulation")
    logger.info(f"Start time: {datetime.now(timezone.utc).isoformat()}")

    sim_config = load_simulation_config(cfg)
    resources = build_resources(OmegaConf.to_container(cfg.resources, resolve=True))

    # Founders all descend from one default ancestor so that an MRCA exists.
    ancestor = Replicator.ancestor(
        representation=list(cfg.ancestor.representation),
        replication_cost=cfg.ancestor.replication_cost,
        alive=False,
    )
    simulation = Simulation(sim_config, resources=resources)
    for _ in range(cfg.ancestor.founders):
        simulation.reproduce(
            [ancestor],
            Replicator(
                representation=list(cfg.ancestor.representation),
                replication_cost=cfg.ancestor.replication_cost,
                resource=cfg.ancestor.get("resource"),
            ),
        )

    logger.info("Configuration:")
    logger.info(f"  - Founders: {cfg.ancestor.founders}")
    logger.info(f"  - Updates: {cfg.updates}")
    logger.info(f"  - Scheduler: {sim_config.scheduler.model_dump()}")

    try:
        simulation.run(cfg.updates)
    except KeyboardInterrupt:
        logger.info("Simulation interrupted by user")
    finally:
        if simulation.population:
            lod = simulation.line_of_descent()
            fixed = sum(1 for o in lod if o.fixation_time is not None)
            logger.info(
                f"MRCA lineage: {len(lod)} organism(s), {fixed} with fixation times"
            )
        logger.info(f"Scheduler metrics: {simulation.scheduler.metrics.model_dump()}")
        logger.info(f"Resource levels: {resources.levels()}")
        duration = time.time() - start_time
        logger.info(f"Total simulation duration: {duration:.2f} seconds")

    return simulation


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    setup_logger(
        log_dir=cfg.logging.log_dir,
        level=cfg.logging.level,
        file_level=cfg.logging.get("file_level"),
    )
    run_simulation(cfg)


if __name__ == "__main__":
    main()
