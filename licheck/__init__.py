from licheck.config import Configuration, InvalidConfiguration, load_config, validate_config
from licheck.headers import HeaderReport, HeaderState, classify, reconcile, scan
from licheck.io import HeaderIOError
