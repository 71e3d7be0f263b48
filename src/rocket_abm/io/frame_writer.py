import logging
import os

import numpy as np

from rocket_abm.log import safe_log_exception

logger = logging.getLogger(__name__)


class FrameWriter:
    """Per-frame snapshot writer for offline renderers.

    Usage:
        fw = FrameWriter(output_dir)
        fw.append(generation, frame, controller.state.snapshot())
        fw.close()

    Each frame becomes ``gen_{g:05d}_frame_{f:05d}.npz`` and a line in
    ``index.txt``. Write failures are logged and never stop the simulation.
    """

    def __init__(self, out_dir):
        self.out_dir = out_dir
        os.makedirs(self.out_dir, exist_ok=True)
        self.index_path = os.path.join(self.out_dir, 'index.txt')
        # line-buffered so a live renderer can tail the index
        self._index_f = open(self.index_path, 'a', buffering=1)
        self.frames_written = 0

    def append(self, generation, frame, arrays_dict):
        """Write ``arrays_dict`` (name -> numpy array) for one frame."""
        fn = os.path.join(self.out_dir, f'gen_{generation:05d}_frame_{frame:05d}.npz')
        try:
            np.savez(fn, **arrays_dict)
            self._index_f.write(f'{generation},{frame},{os.path.basename(fn)}\n')
            self.frames_written += 1
        except (OSError, ValueError) as exc:
            safe_log_exception('frame snapshot write failed', exc, generation=generation, frame=frame)

    def close(self):
        if not self._index_f.closed:
            self._index_f.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
