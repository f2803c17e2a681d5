from src.sim_params import SimParams as sparams_module
from src.user_config import UserConfig as cfg_module

from src.components.backoff import BACKOFF_POLICIES, BackoffStrategy, EventOutcome
from src.utils.file_manager import get_project_root
from src.utils.event_logger import get_logger

from matplotlib import rcParams

import os
import simpy
import logging
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors


rcParams["font.family"] = "serif"
rcParams["font.serif"] = ["DejaVu Serif"]
rcParams["mathtext.fontset"] = "dejavuserif"


class BasePlotter:
    """Base class for all plotters, handling saving and displaying plots."""

    def __init__(
        self, cfg: cfg_module, sparams: sparams_module, env: simpy.Environment = None
    ):
        """
        Initialize a BasePlotter object.

        Args:
            cfg (cfg): The UserConfig object.
            sparams (sparams): The SimParams object.
            env (simpy.Environment, optional): The simulation environment. Defaults to None.
        """
        self.cfg = cfg
        self.sparams = sparams
        self.env: simpy.Environment = env

        self.name: str = "PLOTTER"
        self.logger: logging.Logger = get_logger(self.name, cfg, sparams, env)

    def save_plot(self, figure: plt.Figure, save_name: str, save_format: str) -> str:
        """
        Saves the plot in the configured figures folder.

        Args:
            figure (plt.Figure): The figure to save.
            save_name (str): The base name of the saved file.
            save_format (str): The format of the saved file (e.g. pdf, png).

        Returns:
            str: The path of the saved file, or None if nothing was saved.
        """
        if not save_name or not save_format:
            return None

        save_folder = (
            self.cfg.FIGS_SAVE_PATH
            if os.path.isabs(self.cfg.FIGS_SAVE_PATH)
            else os.path.join(get_project_root(), self.cfg.FIGS_SAVE_PATH)
        )
        os.makedirs(save_folder, exist_ok=True)

        file_path = os.path.join(save_folder, f"{save_name}.{save_format}")
        figure.savefig(file_path)

        self.logger.info(f"Figure saved to {file_path}")
        return file_path

    def _finish(self, fig: plt.Figure, save_name: str, save_format: str):
        plt.tight_layout()

        if self.cfg.ENABLE_FIGS_SAVING and save_name is not None:
            self.save_plot(fig, save_name, save_format)

        if self.cfg.ENABLE_FIGS_DISPLAY:
            plt.show()
        else:
            plt.close(fig)


class ContentionWindowPlotter(BasePlotter):
    """Plotter for the contention window evolution of a single simulation."""

    def plot_cw_evolution(
        self,
        event_history: pd.DataFrame,
        strategy: int,
        save_name: str = "cw_evolution",
        save_format: str = "pdf",
    ):
        """
        Plots the contention window after every event, marking collisions.

        Args:
            event_history (pd.DataFrame): Event history with "timestamp_us", "outcome" and "cw" columns.
            strategy (int): The backoff strategy of the simulation.
            save_name (str, optional): The name of the plot file. Defaults to "cw_evolution".
            save_format (str, optional): The format of the plot file. Defaults to "pdf".
        """
        if not self.cfg.ENABLE_FIGS_SAVING and not self.cfg.ENABLE_FIGS_DISPLAY:
            return

        if event_history.empty:
            self.logger.warning("No events recorded, skipping contention window plot.")
            return

        plt.ion()

        fig, ax = plt.subplots(figsize=(6.4, 4.8))
        ax.set_title(
            BACKOFF_POLICIES[BackoffStrategy(strategy)].name, fontsize=10, loc="left"
        )
        ax.set_xlabel("Time (ms)")
        ax.set_ylabel("Contention Window")
        ax.set_yscale("log", base=2)

        times_ms = event_history["timestamp_us"].to_numpy() / 1e3
        ax.step(times_ms, event_history["cw"], where="post", linewidth=1, label="CW")

        collisions = event_history["outcome"] == EventOutcome.COLLISION
        ax.plot(
            times_ms[collisions.to_numpy()],
            event_history.loc[collisions, "cw"],
            "x",
            color="tab:red",
            markersize=3,
            label="Collision",
        )
        ax.legend(fontsize=8, frameon=False)

        self._finish(fig, save_name, save_format)


class UtilizationPlotter(BasePlotter):
    """Plotter for the utilization of every backoff strategy vs the number of nodes."""

    def validate_data(self, data: pd.DataFrame):
        """Validates the data passed to the plot method."""
        for column in ("strategy", "num_nodes", "utilization"):
            if column not in data.columns:
                self.logger.error(f"Missing column '{column}' in data.")
                return False

        invalid = data[(data["utilization"] < 0) | (data["utilization"] > 1)]
        for _, row in invalid.iterrows():
            self.logger.error(
                f"Invalid utilization {row['utilization']} for strategy {row['strategy']} and {row['num_nodes']} nodes (should be between 0 and 1)"
            )
        return True

    def plot_utilization(
        self,
        data: pd.DataFrame,
        save_name: str = "utilization_vs_nodes",
        save_format: str = "pdf",
    ):
        """
        Plots the utilization of every strategy vs the number of nodes.

        Args:
            data (pd.DataFrame): Sweep results with "strategy", "num_nodes" and "utilization" columns.
            save_name (str, optional): The name of the plot file. Defaults to "utilization_vs_nodes".
            save_format (str, optional): The format of the plot file. Defaults to "pdf".
        """
        if not self.cfg.ENABLE_FIGS_SAVING and not self.cfg.ENABLE_FIGS_DISPLAY:
            return

        if not self.validate_data(data):
            return

        plt.ion()

        fig, ax = plt.subplots(figsize=(6.4, 4.8))
        ax.set_xlabel("Number of nodes")
        ax.set_ylabel("Utilization")
        ax.set_ylim(0, 1)

        tableau_colors = list(mcolors.TABLEAU_COLORS.values())

        for i, (strategy, group) in enumerate(data.groupby("strategy")):
            mean_utilization = group.groupby("num_nodes")["utilization"].mean()
            ax.plot(
                mean_utilization.index.to_numpy(),
                np.asarray(mean_utilization),
                "o-",
                color=tableau_colors[i % len(tableau_colors)],
                markerfacecolor="none",
                markersize=3,
                label=BACKOFF_POLICIES[BackoffStrategy(int(strategy))].name,
            )

        ax.legend(fontsize=8, frameon=False)

        self._finish(fig, save_name, save_format)
