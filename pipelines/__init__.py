"""Pipelines package for the hotline.ua catalog scraper."""

from pipelines.base_pipeline import BasePipeline
from pipelines.hotline_pipeline import HotlinePipeline
