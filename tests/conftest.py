"""
Pytest configuration and shared fixtures
"""

import os
import shutil
import sys
import tempfile

import pytest

# Make src/ importable without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def sample_lines():
    """Measurement lines with several stations, negatives and fractions"""
    return [
        "Hamburg;12.0",
        "Bulawayo;8.9",
        "Palembang;38.8",
        "St. John's;15.2",
        "Cracow;12.6",
        "Bridgetown;26.9",
        "Istanbul;6.2",
        "Roseau;34.4",
        "Conakry;31.2",
        "Istanbul;23.0",
        "Hamburg;-3.5",
        "Cracow;-12.5",
        "Bulawayo;20.25",
        "Palembang;25.5",
    ]


@pytest.fixture
def sample_input_file(temp_dir, sample_lines):
    """Create a sample measurements file for testing"""
    filepath = os.path.join(temp_dir, 'measurements.txt')
    with open(filepath, 'w', encoding='utf-8') as f:
        f.write("\n".join(sample_lines) + "\n")
    return filepath
