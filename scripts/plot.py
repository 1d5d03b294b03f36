# ---
# jupyter:
#   jupytext:
#     formats: ipynb,py:percent
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#       jupytext_version: 1.18.1
#   kernelspec:
#     display_name: tsp
#     language: python
#     name: python3
# ---

# %%
import pandas as pd
import matplotlib.pyplot as plt
plt.style.use('ggplot')

import os
import glob

# %%
# find most recent file in output/ directory
list_of_files = glob.glob('../output/run_*.csv')
logfile = max(list_of_files, key=os.path.getctime)

# print header information
with open(logfile, 'r') as f:
    for _ in range(5):
        print(f.readline().strip())

data = pd.read_csv(logfile, comment="#")
data.tail()

# %%
plt.plot(data["iteration"], data["distance"], label="Sampled Distance", alpha=0.5)
plt.plot(data["iteration"], data["best_distance"], label="Best Distance")
plt.xlabel("Iteration")
plt.ylabel("Distance")
plt.title("Distance over Iterations")
plt.legend()
plt.show()

# %%
plt.figure()
plt.hist(data["distance"], bins=50)
plt.xlabel("Distance")
plt.ylabel("Count")
plt.title("Distribution of Sampled Tour Lengths")
plt.show()
