"""
Presyo Parser Microservice (Worker)
===================================

Description:
    Background worker that listens for parse requests on RabbitMQ, runs the
    bulletin orchestrator and publishes a summary of the run.

Flow:
    1. A producer sends {"agency": "DA", "path": optional} to 'parse_request_queue'.
    2. The worker discovers (or takes the single given) bulletin files.
    3. Bulletins are parsed and the latest_* JSON artifacts are rewritten.
    4. A JSON summary (counts per region, failed files) goes to 'parse_result_queue'.
"""

import json
import logging
import os
import sys
import traceback
from datetime import date
from typing import Optional

import pika
from pika.exceptions import AMQPError

from presyo import config
from presyo.orchestrator import (
    AGENCIES,
    bulletin_from_path,
    discover,
    parse_batch,
    write_batch,
)

logger = logging.getLogger(__name__)


def handle_request(body: bytes) -> Optional[dict]:
    """
    Runs one parse request. Returns the payload to publish, or None when the
    message is invalid and should just be acknowledged.
    """
    try:
        request_data = json.loads(body.decode())
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Invalid message payload: %s", e)
        return None
    if not isinstance(request_data, dict):
        logger.warning("Message payload must be a JSON object")
        return None

    agency = str(request_data.get('agency', '')).upper()
    if agency not in AGENCIES:
        logger.warning("Unknown or missing 'agency' in request payload: %r", agency)
        return None

    single = request_data.get('path')
    if single:
        bulletins = [bulletin_from_path(single, agency)]
    else:
        bulletins = discover(config.pdf_dir(), agency)

    result = parse_batch(bulletins, agency, workers=config.worker_count())
    if result.prices or result.ranges:
        write_batch(result, config.output_dir())

    payload = {
        "status": "SUCCESS" if bulletins else "NO_BULLETINS",
        "date_processed": str(date.today()),
        **result.summary(),
    }
    return payload


def start_worker():
    """
    Initializes the RabbitMQ connection and starts the consumer loop.
    This function blocks and runs indefinitely until interrupted.
    """
    logger.info("Connecting to RabbitMQ...")

    try:
        params = pika.URLParameters(config.CLOUDAMQP_URL)
        connection = pika.BlockingConnection(params)
        channel = connection.channel()

        # Idempotent; durable queues survive a broker restart
        channel.queue_declare(queue=config.REQUEST_QUEUE, durable=True)
        channel.queue_declare(queue=config.OUTPUT_QUEUE, durable=True)

        logger.info("Connected! Listening for tasks in '%s'...", config.REQUEST_QUEUE)

        def callback(ch, method, properties, body):
            logger.info("Command received: %s", body[:200])

            try:
                payload = handle_request(body)
                if payload is not None:
                    ch.basic_publish(
                        exchange='',
                        routing_key=config.OUTPUT_QUEUE,
                        body=json.dumps(payload),
                        properties=pika.BasicProperties(
                            delivery_mode=2,  # persistent
                            content_type='application/json'
                        ))
                    logger.info("Summary sent to '%s': %d prices, %d ranges, %d failed files",
                                config.OUTPUT_QUEUE, payload["prices"], payload["ranges"],
                                len(payload["failures"]))
            except Exception:
                # One bad request must not take the consumer down
                logger.error("Error during processing:\n%s", traceback.format_exc())

            # Manual ack: the message leaves the queue only once handled
            ch.basic_ack(delivery_tag=method.delivery_tag)

        channel.basic_consume(queue=config.REQUEST_QUEUE, on_message_callback=callback, auto_ack=False)
        channel.start_consuming()

    except AMQPError as e:
        logger.critical("CRITICAL SYSTEM ERROR: %s", e)
        logger.critical("Please verify your CLOUDAMQP_URL and network connection.")


if __name__ == "__main__":
    config.configure_logging()
    try:
        start_worker()
    except KeyboardInterrupt:
        print('Worker stopped manually.')
        try:
            sys.exit(0)
        except SystemExit:
            os._exit(0)
