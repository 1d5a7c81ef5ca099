"""Constants for the project."""

from pathlib import Path
from typing import Dict

PROJECT_ROOT = Path(__file__).parent.parent

# ============================================================================
# Data directories
# ============================================================================
DATA_FOLDER = PROJECT_ROOT / "data"
SIMULATED_FOLDER = DATA_FOLDER / "simulated"
SIMULATED_READS = SIMULATED_FOLDER / "reads.fastq.gz"
SIMULATED_REFERENCES = SIMULATED_FOLDER / "references.fa"

# ============================================================================
# Results directories
# ============================================================================
RESULTS_FOLDER = PROJECT_ROOT / "results"

# Error model outputs (from estimate_error_matrix.py)
ERROR_MATRIX_YAML = RESULTS_FOLDER / "error_matrix.yaml"
ASSIGNMENTS_CSV = RESULTS_FOLDER / "assignments.csv"
REFERENCES_CSV = RESULTS_FOLDER / "references.csv"
TRANSITIONS_CSV = RESULTS_FOLDER / "transitions.csv"

# Error matrix plots (from plot_error_matrix.py)
FIGURES_FOLDER = RESULTS_FOLDER / "figures"

# ============================================================================
# Algorithm parameters
# ============================================================================
PRECISION = 8

# ============================================================================
# Simulation defaults
# ============================================================================
SIM_NUM_REFERENCES = 3
SIM_REFERENCE_LENGTH = 50
SIM_NUM_READS = 10000
SIM_QUALITY = 35
SIM_SUBSTITUTIONS: Dict[str, float] = {"A2C": 0.01}
RANDOM_SEED = 42

# ============================================================================
# Plot styling
# ============================================================================
OBSERVED_COLOR = "#2E86AB"
FITTED_COLOR = "#A23B72"
PLOT_DPI = 300
PLOT_GRID_ALPHA = 0.3
PLOT_XLABEL_FONTSIZE = 12
PLOT_YLABEL_FONTSIZE = 12
PLOT_TITLE_FONTSIZE = 14
