# mnistff

A three-layer feed-forward neural network that learns to recognise the
handwritten digits of the MNIST data set. It is built on numpy and trained
with RMSProp.

The network (`mnistff.network.Network`) maps each 28×28 image (784 pixels)
through two ReLU hidden layers of 300 and 100 units to a softmax over the ten
digits. The layers have no biases. The weights start from a Glorot normal
initialisation; the command seeds the random generator with 7945, so runs can
be repeated. The cost is the negated mean of the element-wise product of the
predictions and the targets.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Data

The MNIST files are read in IDX format from a directory, `./mnist/` by
default:

```
mnist/train-images.idx3-ubyte
mnist/train-labels.idx1-ubyte
mnist/t10k-images.idx3-ubyte
mnist/t10k-labels.idx1-ubyte
```

The data sets `train` and `dev` both read the training files; `test` reads
the `t10k` files. Pixels are scaled from 0–255 into 0.1–0.999, and each label
becomes a row of ten targets holding 0.1, with 0.9 at the label's position.

## Usage

```
mnistff
```

This trains on the chosen data set, then runs the test set through the
network. Options take one or two leading dashes.

| Option        | Default    | Meaning                                            |
|---------------|------------|----------------------------------------------------|
| `-epochs`     | `5`        | number of epochs to train for                      |
| `-dataset`    | `train`    | data set to train on: `train`, `dev` or `test`     |
| `-dtype`      | `float64`  | floating-point type: `float64` or `float32`        |
| `-batchsize`  | `100`      | batch size                                         |
| `-cpuprofile` | empty      | accepted and ignored                               |
| `-mnist`      | `./mnist/` | directory holding the IDX files                    |
| `-images`     | `images`   | directory the test images are written to           |
| `-output`     | `.`        | directory the per-batch CSV files are written to   |

For example:

```
mnistff -epochs 10 -batchsize 50
```

Only full batches are used; a trailing partial batch is dropped. While it
runs, a progress bar shows each epoch, the cost of the last batch is logged at
the end of every epoch and of the test pass, and the test accuracy is logged
at the end. An unknown dtype or data set, or a missing or malformed data file,
is reported on standard error and the command exits with status 1.

## Output

During the test pass the command writes:

- one JPEG per test image under the `-images` directory (created if it does
  not exist), named `<batch> - <index> - <label> - <guess>.jpg`, where
  `label` is the true digit and `guess` the network's prediction (the first
  highest value wins ties);
- one CSV per batch under the `-output` directory, named `<batch>.csv`, with
  one row per image and the ten predicted class probabilities to six decimal
  places.

The images are rendered from the scaled pixel weights: each weight is clamped
to 0.01–0.99, multiplied by 255, reduced by 255 and wrapped into a byte.

## Library use

The parts can be used on their own:

```python
import numpy as np
from mnistff.dataset import load
from mnistff.network import Network
from mnistff.solver import RMSPropSolver
from mnistff.training import train, evaluate

inputs, targets = load("train", "./mnist/", np.float64)
network = Network(np.float64, np.random.default_rng(7945))
solver = RMSPropSolver(batch_size=100)
costs = train(network, solver, inputs, targets, 100, 5)

test_inputs, test_targets = load("test", "./mnist/", np.float64)
result = evaluate(network, test_inputs, test_targets, 100,
                  image_dir=None, csv_dir=None)
print(result.accuracy, result.cost)
```

- `mnistff.dataset`: `parse_dtype`, `read_idx_images`, `read_idx_labels`,
  `pixel_weight`, `one_hot`, `load`, `batch_bounds`.
- `mnistff.network`: `glorot_normal`, `relu`, `softmax`, and `Network` with
  `learnables`, `forward`, `cost` and `gradients`.
- `mnistff.solver`: `RMSPropSolver` (learning rate 0.001, eps 1e-8, rho
  0.999 by default; gradients are divided by the batch size) with `step`,
  which updates the weight arrays in place.
- `mnistff.training`: `train_epoch`, `train`, `evaluate` and the
  `EvaluationResult` it returns (cost, predictions, labels, guesses, written
  paths and `accuracy`). Passing `None` for `image_dir` or `csv_dir` skips
  that output.
- `mnistff.imagery`: `reverse_pixel_weight`, `visualize_row`,
  `argmax_first`, `image_filename`, `save_row_image`, `format_prediction`,
  `write_predictions_csv`.

## What it does not do

The package does not download the MNIST files, does not save or load trained
weights, and does not profile: `-cpuprofile` is accepted only so that
existing command lines keep working.