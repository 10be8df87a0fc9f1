#!/usr/bin/env python3
"""
Process Command Implementation
Runs the combined resize / strip / watermark pipeline
"""

import asyncio
import time
from pathlib import Path
from typing import Optional, Dict, Any

import yaml

from ..core import get_logger, get_config
from ..core.exceptions import ConfigurationError
from ..processing import ProcessConfig, all_process, get_image_ori
from .image import ImageCommand


class ProcessCommand:
    """Handles the combined pipeline"""

    def __init__(self, config_dir: Optional[str] = None, verbose: bool = False):
        """Initialize process command

        Args:
            config_dir: Custom config directory
            verbose: Enable verbose output
        """
        self.config_dir = config_dir
        self.verbose = verbose
        self.logger = get_logger()
        self.config = get_config()
        self.images = ImageCommand(config_dir, verbose)

    def load_job(self, job_file: Optional[str]) -> Dict[str, Any]:
        """Load a YAML job file holding sizeConfig, fontConfig, needExif, orientation

        Args:
            job_file: Path to the job file, or None

        Returns:
            Job mapping (empty if no file)
        """
        if not job_file:
            return {}

        path = Path(job_file)
        try:
            with open(path, 'r') as f:
                job = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse job file: {path}\n"
                f"Error: {e}"
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read job file: {path}\n"
                f"Error: {type(e).__name__}: {e}"
            )

        if job is None:
            return {}
        if not isinstance(job, dict):
            raise ConfigurationError(f"Job file must contain a mapping: {path}")

        self.logger.debug(f"Loaded job file: {path}")
        return job

    def execute(self,
                input_path: str,
                output_path: str,
                size: Optional[str] = None,
                long_side: Optional[int] = None,
                short_side: Optional[int] = None,
                keep_exif: bool = False,
                orientation: Optional[str] = None,
                job_file: Optional[str] = None) -> Dict[str, Any]:
        """Build the process config and run the pipeline

        Command-line options override values from the job file. When
        metadata is being stripped and no orientation is known, it is read
        from the source first.

        Returns:
            Result with output path and duration
        """
        start_time = time.time()

        job = ProcessConfig.from_mapping(self.load_job(job_file))

        size_config = self.images.resolve_size(input_path, size, long_side, short_side)
        if size_config is None and job.size is not None:
            size_config = list(job.size)

        keep_exif = keep_exif or job.keep_exif
        orientation = orientation or job.orientation

        if not keep_exif and orientation is None:
            orientation = asyncio.run(get_image_ori(input_path))
            self.logger.info(f"Source orientation: {orientation}")

        process_config = ProcessConfig(
            size=tuple(size_config) if size_config else None,
            font=job.font,
            keep_exif=keep_exif,
            orientation=orientation
        )

        result_path = asyncio.run(all_process(input_path, output_path, process_config))

        return {
            'image_path': result_path,
            'duration': time.time() - start_time
        }
