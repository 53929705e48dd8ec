import csv
import math
from numbers import Real
from pathlib import Path
from AINNCS.logger import Logger

logger = Logger.setup_logger(__name__)

HEADER = ('benchmark', 'instance', 'result', 'time')

class ResultsFile :
    """The results table, one row per benchmark instance."""
    def __init__(self, folder='results', filename='results.csv') -> None:
        self.folder = Path(folder)
        self.folder.mkdir(parents=True, exist_ok=True)
        self.path = self.folder.joinpath(filename)
        self.table = []
        self.io = open(self.path, 'w', newline='')
        self.writer = csv.writer(self.io, lineterminator='\n')
        self.writer.writerow(HEADER)
        logger.info(f'Writing results to {self.path}')

    def add (self, benchmark, instance, result, time) :
        if not isinstance(time, Real) or not math.isfinite(time) or time < 0 :
            raise ValueError(f'time should be a finite non-negative number of seconds, got {time!r}')
        self.writer.writerow((benchmark, instance, result, float(time)))
        self.io.flush()
        self.table.append([benchmark, instance, result, float(time)])

    @property
    def rows (self) :
        return len(self.table)

    def close (self) :
        if not self.io.closed :
            self.io.write('\n')
            self.io.close()

    def __enter__ (self) :
        return self

    def __exit__ (self, *exc) :
        self.close()
        return False
