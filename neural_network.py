"""
Neural Network Brain for Forage.

A plain feed-forward network: every neuron computes

    relu(dot(inputs, weights) + bias)

and layers are applied one after another. The network can be built from
explicit neurons, from random weights, or decoded from a chromosome.
Decoding reads genes in exactly the order weights_and_biases() writes
them (per layer, per neuron: bias first, then the nin weights), so

    NeuralNetwork.from_chromosome(nin, nouts, net.weights_and_biases())

rebuilds ``net`` exactly.
"""

from typing import Iterable, Iterator, Sequence

import numpy as np


def _take(genes: Iterator[float]) -> float:
    try:
        return float(next(genes))
    except StopIteration:
        raise ValueError("not enough genes to build the network") from None


# ──────────────────────────────────────────────────────────────────────────────
# Neuron
# ──────────────────────────────────────────────────────────────────────────────

class Neuron:
    __slots__ = ("weights", "bias")

    def __init__(self, weights: Sequence[float], bias: float):
        self.weights = np.array(weights, dtype=np.float64).reshape(-1)
        self.bias    = float(bias)

    @classmethod
    def random(cls, rng: np.random.Generator, nin: int, bias: float) -> "Neuron":
        """Weights uniform in [-1, 1]; the bias is not randomised."""
        return cls(rng.uniform(-1.0, 1.0, size=nin), bias)

    @classmethod
    def from_genes(cls, nin: int, genes: Iterator[float]) -> "Neuron":
        bias    = _take(genes)
        weights = [_take(genes) for _ in range(nin)]
        return cls(weights, bias)

    @property
    def nin(self) -> int:
        return len(self.weights)

    def forward(self, inputs) -> float:
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.shape != self.weights.shape:
            raise ValueError(
                f"neuron expects {len(self.weights)} inputs, got {inputs.size}")
        return max(0.0, float(np.dot(inputs, self.weights)) + self.bias)


# ──────────────────────────────────────────────────────────────────────────────
# Layer
# ──────────────────────────────────────────────────────────────────────────────

class Layer:
    __slots__ = ("neurons",)

    def __init__(self, neurons: Sequence[Neuron]):
        neurons = list(neurons)
        if not neurons:
            raise ValueError("a layer needs at least one neuron")
        if len({n.nin for n in neurons}) != 1:
            raise ValueError("all neurons in a layer must share the same input size")
        self.neurons = neurons

    @classmethod
    def random(cls, rng: np.random.Generator, nin: int, nout: int,
               bias: float) -> "Layer":
        return cls([Neuron.random(rng, nin, bias) for _ in range(nout)])

    @classmethod
    def from_genes(cls, nin: int, nout: int, genes: Iterator[float]) -> "Layer":
        return cls([Neuron.from_genes(nin, genes) for _ in range(nout)])

    @property
    def nin(self) -> int:
        return self.neurons[0].nin

    @property
    def nout(self) -> int:
        return len(self.neurons)

    def forward(self, inputs) -> np.ndarray:
        return np.array([n.forward(inputs) for n in self.neurons])


# ──────────────────────────────────────────────────────────────────────────────
# Network
# ──────────────────────────────────────────────────────────────────────────────

def parameter_count(nin: int, nouts: Sequence[int]) -> int:
    """Number of genes (biases + weights) a topology needs."""
    total = 0
    for nout in nouts:
        total += nout * (nin + 1)
        nin = nout
    return total


class NeuralNetwork:
    """
    Stateless multi-layer perceptron.
    Topology: nin → nouts[0] → nouts[1] → ... → nouts[-1]
    """

    def __init__(self, layers: Sequence[Layer]):
        layers = list(layers)
        if not layers:
            raise ValueError("a network needs at least one layer")
        for prev, nxt in zip(layers, layers[1:]):
            if prev.nout != nxt.nin:
                raise ValueError(
                    f"layer output size {prev.nout} does not match "
                    f"next layer input size {nxt.nin}")
        self.layers = layers

    # ──────────────────────────────────────────────────────────────────────────

    @classmethod
    def random(cls, rng: np.random.Generator, nin: int, nouts: Sequence[int],
               bias: float) -> "NeuralNetwork":
        layers = []
        for nout in nouts:
            layers.append(Layer.random(rng, nin, nout, bias))
            nin = nout
        return cls(layers)

    @classmethod
    def from_chromosome(cls, nin: int, nouts: Sequence[int],
                        genes: Iterable[float]) -> "NeuralNetwork":
        """
        Decode a gene sequence into a network. Surplus trailing genes are
        ignored; too few genes raise ValueError.
        """
        genes  = iter(genes)
        layers = []
        for nout in nouts:
            layers.append(Layer.from_genes(nin, nout, genes))
            nin = nout
        return cls(layers)

    def weights_and_biases(self) -> list:
        """Flatten the parameters in decoding order."""
        genes = []
        for layer in self.layers:
            for neuron in layer.neurons:
                genes.append(neuron.bias)
                genes.extend(float(w) for w in neuron.weights)
        return genes

    def topology(self) -> tuple:
        """(nin, [nout, ...]) – enough to decode a chromosome of this net."""
        return self.layers[0].nin, [layer.nout for layer in self.layers]

    # ──────────────────────────────────────────────────────────────────────────

    def forward(self, inputs) -> np.ndarray:
        """
        Run one forward pass.

        Args:
            inputs: array-like of length nin

        Returns:
            float64 array of length nouts[-1], every value >= 0
        """
        outputs = np.asarray(inputs, dtype=np.float64)
        for layer in self.layers:
            outputs = layer.forward(outputs)
        return outputs

    def summary(self) -> str:
        nin, nouts = self.topology()
        shape = " → ".join(str(n) for n in [nin, *nouts])
        return (f"NeuralNetwork ({shape}, "
                f"{parameter_count(nin, nouts)} parameters)")
