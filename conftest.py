import pytest
import os
import sys

# Backend modules are imported top-level (config, utils.*, api.*) as the app does
root_dir = os.path.abspath(os.path.dirname(__file__))
backend_dir = os.path.join(root_dir, 'backend')
if os.path.exists(backend_dir):
    sys.path.insert(0, backend_dir)

# Configure test environment before settings are imported:
# never hit the published sheet on app startup during tests
os.environ.setdefault('LOAD_ON_STARTUP', 'false')


SAMPLE_CSV = (
    'from_content,to_content,types\n'
    'cat,പൂച്ച,noun\n'
    'category,വിഭാഗം,\n'
    '"dog, domestic",നായ,"noun, animal"\n'
    'broken,row\n'
    ' ,ശൂന്യം,\n'
    'Catalogue,കാറ്റലോഗ്,noun\n'
)


@pytest.fixture
def sample_csv():
    """Dictionary sheet export with one malformed row and one row without a term."""
    return SAMPLE_CSV
