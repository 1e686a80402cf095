#!/usr/bin/env python3
"""
HetNet scenario main script

Usage: python -m hetnet_scenario.main [config.yaml] [output_dir]
"""

import sys

from .components.scenario import ScenarioConfig
from .driver import ScenarioDriver


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    # compiled-in reference scenario unless a file is given
    config = ScenarioConfig.from_file(argv[0]) if argv else ScenarioConfig()

    driver = ScenarioDriver(config)
    driver.setup()
    driver.run()

    if len(argv) > 1:
        driver.save_layout(argv[1])
        driver.plot_layout(argv[1])
    return driver


if __name__ == '__main__':
    main()
