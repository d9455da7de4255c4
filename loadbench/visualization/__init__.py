from loadbench.visualization.reporter import Reporter, save_results, to_dict

__all__ = ["Reporter", "save_results", "to_dict"]
