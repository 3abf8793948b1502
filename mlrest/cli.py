"""
Command line interface of mlrest. Every command talks to the tracking server given by
``--tracking-uri`` or, when the option is omitted, the ``MLFLOW_TRACKING_URI`` environment
variable.
"""

import functools
import json
import logging
import random

import click
from tabulate import tabulate

from mlrest.entities import ViewType
from mlrest.environment_variables import MLFLOW_TRACKING_URI
from mlrest.exceptions import Conflict, MlrestException
from mlrest.tracking.client import TrackingClient
from mlrest.utils.time import conv_longdate_to_str
from mlrest.version import VERSION

_logger = logging.getLogger(__name__)

TRACKING_URI = click.option(
    "--tracking-uri",
    envvar=MLFLOW_TRACKING_URI.name,
    type=click.STRING,
    help="Address of the tracking server, e.g. http://127.0.0.1:5000. "
    f"Defaults to the {MLFLOW_TRACKING_URI.name} environment variable.",
)
EXPERIMENT_ID = click.argument("experiment_id", type=click.STRING)
RUN_ID = click.argument("run_id", type=click.STRING)
VIEW = click.option(
    "--view",
    "-v",
    type=click.Choice(["active_only", "deleted_only", "all"]),
    default="active_only",
    help="Select view type. Valid view types are 'active_only' (default), 'deleted_only', "
    "and 'all'.",
)


def _translate_errors(func):
    """Reports mlrest errors raised by a command as click errors, exiting with code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MlrestException as e:
            raise click.ClickException(f"{type(e).__name__}: {e.message}") from e

    return wrapper


def _format_time(millis):
    return conv_longdate_to_str(millis) if millis else ""


@click.group()
@click.version_option(version=VERSION)
def cli():
    """Client of the MLflow tracking REST API."""


@cli.group("experiments")
def experiments():
    """
    Manage experiments of a tracking server.
    """


@experiments.command("create")
@click.argument("experiment_name")
@click.option(
    "--artifact-location",
    "-l",
    help="Base location for runs to store artifact results. "
    "If no location is provided, the tracking server will pick a default.",
)
@TRACKING_URI
@_translate_errors
def create_experiment(experiment_name, artifact_location, tracking_uri):
    """
    Create an experiment in the configured tracking server.
    """
    client = TrackingClient(tracking_uri)
    experiment = client.create_experiment(experiment_name, artifact_location=artifact_location)
    click.echo(f"Created experiment '{experiment.name}' with id {experiment.experiment_id}")


@experiments.command("get")
@EXPERIMENT_ID
@TRACKING_URI
@_translate_errors
def get_experiment(experiment_id, tracking_uri):
    """
    Print the details of an experiment as JSON.
    """
    client = TrackingClient(tracking_uri)
    experiment = client.get_experiment(experiment_id)
    click.echo(json.dumps(experiment.to_dictionary(), indent=4))


@experiments.command("rename")
@EXPERIMENT_ID
@click.argument("new_name")
@TRACKING_URI
@_translate_errors
def rename_experiment(experiment_id, new_name, tracking_uri):
    """
    Renames an active experiment.
    Returns an error if the experiment is inactive or the name is taken.
    """
    TrackingClient(tracking_uri).rename_experiment(experiment_id, new_name)
    click.echo(f"Experiment with id {experiment_id} has been renamed to '{new_name}'.")


@experiments.command("delete")
@EXPERIMENT_ID
@TRACKING_URI
@_translate_errors
def delete_experiment(experiment_id, tracking_uri):
    """
    Mark an experiment for deletion. Return an error if the experiment does not exist or
    is already marked. You can restore a marked experiment with ``restore``.
    """
    TrackingClient(tracking_uri).delete_experiment(experiment_id)
    click.echo(f"Experiment with ID {experiment_id} has been deleted.")


@experiments.command("restore")
@EXPERIMENT_ID
@TRACKING_URI
@_translate_errors
def restore_experiment(experiment_id, tracking_uri):
    """
    Restore a deleted experiment.
    Returns an error if the experiment is active or has been permanently deleted.
    """
    TrackingClient(tracking_uri).restore_experiment(experiment_id)
    click.echo(f"Experiment with id {experiment_id} has been restored.")


@experiments.command("search")
@VIEW
@click.option("--filter", "filter_string", help="Filter query string, e.g. \"name = 'a'\".")
@TRACKING_URI
@_translate_errors
def search_experiments(view, filter_string, tracking_uri):
    """
    Search experiments in the configured tracking server.
    """
    client = TrackingClient(tracking_uri)
    experiments = client.search_experiments(
        view_type=ViewType.from_string(view), filter_string=filter_string
    )
    table = [
        [exp.experiment_id, exp.name, exp.lifecycle_stage, exp.artifact_location]
        for exp in experiments
    ]
    click.echo(
        tabulate(table, headers=["Experiment Id", "Name", "Lifecycle Stage", "Artifact Location"])
    )


@cli.group("runs")
def runs():
    """
    Manage runs of a tracking server.
    """


@runs.command("create")
@EXPERIMENT_ID
@click.option("--run-name", type=click.STRING, help="Optional human-readable name for the run.")
@TRACKING_URI
@_translate_errors
def create_run(experiment_id, run_name, tracking_uri):
    """
    Create a run in the given experiment and print its ID. The run stays ``RUNNING`` until it
    is terminated.
    """
    run = TrackingClient(tracking_uri).create_run(experiment_id, run_name=run_name)
    click.echo(run.info.run_id)


@runs.command("get")
@RUN_ID
@TRACKING_URI
@_translate_errors
def get_run(run_id, tracking_uri):
    """
    All of run details will print to the stdout as JSON format.
    """
    run = TrackingClient(tracking_uri).get_run(run_id)
    click.echo(json.dumps(run.to_dictionary(), indent=4))


@runs.command("search")
@click.argument("experiment_ids", nargs=-1, required=True)
@click.option("--filter", "filter_string", default="", help="Filter query string.")
@click.option(
    "--order-by",
    multiple=True,
    help="Column to order by, e.g. 'metrics.rmse DESC'. Can be given several times.",
)
@click.option("--max-results", type=click.INT, default=1000, show_default=True)
@VIEW
@TRACKING_URI
@_translate_errors
def search_runs(experiment_ids, filter_string, order_by, max_results, view, tracking_uri):
    """
    Search runs of the given experiments.
    """
    client = TrackingClient(tracking_uri)
    runs = client.search_runs(
        list(experiment_ids),
        filter_string=filter_string,
        run_view_type=ViewType.from_string(view),
        max_results=max_results,
        order_by=list(order_by) or None,
    )
    table = [
        [
            _format_time(run.info.start_time),
            run.info.run_name or "",
            run.info.run_id,
            run.info.status,
        ]
        for run in runs
    ]
    click.echo(tabulate(table, headers=["Date", "Name", "ID", "Status"]))


@runs.command("log-param")
@RUN_ID
@click.argument("key")
@click.argument("value")
@TRACKING_URI
@_translate_errors
def log_param(run_id, key, value, tracking_uri):
    """
    Log a parameter to a run. A parameter cannot be changed once logged.
    """
    TrackingClient(tracking_uri).log_param(run_id, key, value)
    click.echo(f"Logged param {key}={value} to run {run_id}.")


@runs.command("log-metric")
@RUN_ID
@click.argument("key")
@click.argument("value", type=click.FLOAT)
@click.option("--step", type=click.INT, default=None, help="Training step. Defaults to 0.")
@click.option("--timestamp", type=click.INT, default=None, help="Milliseconds since the epoch.")
@TRACKING_URI
@_translate_errors
def log_metric(run_id, key, value, step, timestamp, tracking_uri):
    """
    Append a sample to a metric of a run.
    """
    TrackingClient(tracking_uri).log_metric(run_id, key, value, timestamp=timestamp, step=step)
    click.echo(f"Logged metric {key}={value} to run {run_id}.")


@runs.command("set-tag")
@RUN_ID
@click.argument("key")
@click.argument("value")
@TRACKING_URI
@_translate_errors
def set_tag(run_id, key, value, tracking_uri):
    """
    Set a tag on a run, overwriting any previous value.
    """
    TrackingClient(tracking_uri).set_tag(run_id, key, value)
    click.echo(f"Set tag {key}={value} on run {run_id}.")


@runs.command("terminate")
@RUN_ID
@click.option(
    "--status",
    type=click.Choice(["FINISHED", "FAILED", "KILLED"], case_sensitive=False),
    default="FINISHED",
    show_default=True,
)
@TRACKING_URI
@_translate_errors
def terminate_run(run_id, status, tracking_uri):
    """
    Terminate a run with the given status.
    """
    run_info = TrackingClient(tracking_uri).terminate_run(run_id, status=status.upper())
    click.echo(f"Run {run_id} terminated with status {run_info.status}.")


@cli.command("demo")
@click.option("--experiment", "-e", required=True, help="Name of the experiment to log to.")
@click.option("--create", "-c", is_flag=True, help="Create the experiment instead of fetching it.")
@click.option("--runs", "-r", "num_runs", type=click.INT, default=1, show_default=True)
@TRACKING_URI
@_translate_errors
def demo(experiment, create, num_runs, tracking_uri):
    """
    Log a few demo runs to an experiment. Each run logs the params ``i`` and ``constant``, ten
    pseudo-random ``rand`` metric samples and is terminated as ``FINISHED``.
    """
    client = TrackingClient(tracking_uri)
    if create:
        try:
            created = client.create_experiment(experiment)
        except Conflict:
            click.echo(f"The experiment {experiment} already exists.")
            click.echo(
                "Run again without the -c or --create flag to fetch the existing experiment."
            )
            return
        click.echo(f"Experiment with id {created.experiment_id} was created successfully!")
        experiment_id = created.experiment_id
    else:
        fetched = client.get_experiment_by_name(experiment)
        if fetched is None:
            click.echo(f"The experiment {experiment} does not exist.")
            click.echo("Run again with the -c or --create flag to create a new experiment.")
            return
        click.echo(
            f"Experiment {fetched.name} with id {fetched.experiment_id} was fetched successfully!"
        )
        experiment_id = fetched.experiment_id

    for i in range(num_runs):
        _logger.info(f"Executing run {i}")
        with client.experiment(experiment_id).create_run() as run:
            run.log_param("i", i)
            run.log_param("constant", 42)
            # Seeded by the run index so that repeated demos log the same series.
            rng = random.Random(i)
            for step in range(10):
                run.log_metric("rand", rng.randint(0, 65535) / 65535, step=step)
        click.echo(f"Run {run.run_id} finished.")


if __name__ == "__main__":
    cli()
