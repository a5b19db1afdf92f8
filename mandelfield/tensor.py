"""Vectorized escape-time iteration with TensorFlow."""

from __future__ import annotations

import numpy as np
import tensorflow as tf


@tf.function
def _divergence_step(
    zs: tf.Tensor, cs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor, threshold: tf.Tensor
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Perform a single iteration for samples that have not escaped."""

    zs_new = zs * zs + cs
    zs = tf.where(active, zs_new, zs)
    ns = ns + tf.cast(active, tf.int32)
    new_active = tf.logical_and(active, tf.abs(zs) < threshold)
    return zs, ns, new_active


@tf.function
def _divergence_run(cs: tf.Tensor, threshold: tf.Tensor, itermax: tf.Tensor) -> tf.Tensor:
    """Iterate every sample with a TensorFlow while loop; return the counts."""

    i = tf.constant(0, dtype=tf.int32)
    zs = tf.identity(cs)
    ns = tf.zeros(tf.shape(cs), tf.int32)
    active = tf.abs(zs) < threshold

    def cond(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, itermax), tf.reduce_any(active))

    def body(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, ns, active = _divergence_step(zs, cs, ns, active, threshold)
        return i + 1, zs, ns, active

    _, _, ns, _ = tf.while_loop(cond, body, (i, zs, ns, active))
    return ns


def compute_field_tf(samples: np.ndarray, threshold: float, itermax: int, *, device: str = "/CPU:0") -> np.ndarray:
    """Escape velocities of a complex128 sample array, computed in one pass."""

    with tf.device(device):
        cs = tf.convert_to_tensor(np.asarray(samples, dtype=np.complex128), dtype=tf.complex128)
        ns = _divergence_run(
            cs,
            tf.constant(threshold, dtype=tf.float64),
            tf.constant(itermax, dtype=tf.int32),
        )
    return ns.numpy().astype(np.int32, copy=False)
